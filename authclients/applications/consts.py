class ClientTypes:
    CONFIDENTIAL = "confidential"
    HYBRID = "hybrid"
    PUBLIC = "public"

    ALL = (CONFIDENTIAL, HYBRID, PUBLIC)


class ConsentTypes:
    EXPLICIT = "explicit"
    EXTERNAL = "external"
    IMPLICIT = "implicit"
    SYSTEMATIC = "systematic"


class Permissions:
    """Names of the permissions that can be granted to an application.

    Permissions are namespaced by a prefix. Endpoint, grant type and scope
    permissions are open by default: until at least one permission of a
    category is granted, every permission of that category is implied.
    """

    class Prefixes:
        ENDPOINT = "endpoint:"
        GRANT_TYPE = "grant_type:"
        SCOPE = "scope:"

    class Endpoints:
        AUTHORIZATION = "endpoint:authorization"
        INTROSPECTION = "endpoint:introspection"
        LOGOUT = "endpoint:logout"
        REVOCATION = "endpoint:revocation"
        TOKEN = "endpoint:token"

    class GrantTypes:
        AUTHORIZATION_CODE = "grant_type:authorization_code"
        CLIENT_CREDENTIALS = "grant_type:client_credentials"
        IMPLICIT = "grant_type:implicit"
        PASSWORD = "grant_type:password"
        REFRESH_TOKEN = "grant_type:refresh_token"

    class Scopes:
        ADDRESS = "scope:address"
        EMAIL = "scope:email"
        PHONE = "scope:phone"
        PROFILE = "scope:profile"
        ROLES = "scope:roles"
