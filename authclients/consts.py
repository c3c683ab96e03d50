name = "authclients"
version = "0.3.0"
author = "authclients contributors"
homepage = "https://github.com/authclients/authclients"
