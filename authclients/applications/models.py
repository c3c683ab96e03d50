"""
authclients.applications.models
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Application records, descriptors and absolute URI values.
"""

from authclients.common.urls import is_well_formed_uri
from authclients.common.urls import urlparse


class AbsoluteURI(str):
    """An absolute, well-formed URI.

    The value keeps the exact text it was created from, so converting it
    back with ``str()`` never alters a registered address::

        >>> uri = AbsoluteURI.parse("https://client.example.com/cb?a=1")
        >>> uri.netloc
        'client.example.com'
        >>> str(uri)
        'https://client.example.com/cb?a=1'

    :raise: ValueError if the value is empty or not a well-formed absolute URI
    """

    def __new__(cls, value):
        if not value:
            raise ValueError("URI cannot be null or empty")
        if not is_well_formed_uri(value):
            raise ValueError(f"'{value}' is not a valid absolute URI")
        return super().__new__(cls, value)

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        return cls(value)

    @property
    def _parts(self):
        return urlparse.urlsplit(str(self))

    @property
    def scheme(self):
        return self._parts.scheme

    @property
    def netloc(self):
        return self._parts.netloc

    @property
    def path(self):
        return self._parts.path

    @property
    def query(self):
        return self._parts.query

    @property
    def fragment(self):
        return self._parts.fragment


class ApplicationMixin:
    """The accessors an application model MUST implement to be handled by
    :class:`~authclients.applications.ApplicationManager`.

    A model stored with an ORM would implement it like::

        class OAuth2Application(db.Model, ApplicationMixin):
            def get_client_id(self):
                return self.client_id

            def set_client_id(self, client_id):
                self.client_id = client_id
    """

    def get_id(self):
        """The unique identifier assigned by the store, or None before
        the application is persisted.
        """
        raise NotImplementedError()

    def set_id(self, identifier):
        raise NotImplementedError()

    def get_client_id(self):
        raise NotImplementedError()

    def set_client_id(self, client_id):
        raise NotImplementedError()

    def get_client_secret(self):
        """The obfuscated client secret. The plain text secret is never
        stored on the application.
        """
        raise NotImplementedError()

    def set_client_secret(self, client_secret):
        raise NotImplementedError()

    def get_client_type(self):
        raise NotImplementedError()

    def set_client_type(self, client_type):
        raise NotImplementedError()

    def get_consent_type(self):
        raise NotImplementedError()

    def set_consent_type(self, consent_type):
        raise NotImplementedError()

    def get_display_name(self):
        raise NotImplementedError()

    def set_display_name(self, display_name):
        raise NotImplementedError()

    def get_permissions(self):
        """A set of permission names, e.g. ``{"endpoint:token"}``."""
        raise NotImplementedError()

    def set_permissions(self, permissions):
        raise NotImplementedError()

    def get_redirect_uris(self):
        raise NotImplementedError()

    def set_redirect_uris(self, redirect_uris):
        raise NotImplementedError()

    def get_post_logout_redirect_uris(self):
        raise NotImplementedError()

    def set_post_logout_redirect_uris(self, post_logout_redirect_uris):
        raise NotImplementedError()


class Application(ApplicationMixin):
    """Plain in-memory application, used by
    :class:`~authclients.applications.MemoryApplicationStore`.
    """

    def __init__(
        self,
        client_id=None,
        client_secret=None,
        client_type=None,
        consent_type=None,
        display_name=None,
        permissions=None,
        redirect_uris=None,
        post_logout_redirect_uris=None,
        id=None,
    ):
        self.id = id
        self.client_id = client_id
        self.client_secret = client_secret
        self.client_type = client_type
        self.consent_type = consent_type
        self.display_name = display_name
        self.permissions = set(permissions or ())
        self.redirect_uris = list(redirect_uris or ())
        self.post_logout_redirect_uris = list(post_logout_redirect_uris or ())

    def __repr__(self):
        return f"<Application {self.id!r} client_id={self.client_id!r}>"

    def get_id(self):
        return self.id

    def set_id(self, identifier):
        self.id = identifier

    def get_client_id(self):
        return self.client_id

    def set_client_id(self, client_id):
        self.client_id = client_id

    def get_client_secret(self):
        return self.client_secret

    def set_client_secret(self, client_secret):
        self.client_secret = client_secret

    def get_client_type(self):
        return self.client_type

    def set_client_type(self, client_type):
        self.client_type = client_type

    def get_consent_type(self):
        return self.consent_type

    def set_consent_type(self, consent_type):
        self.consent_type = consent_type

    def get_display_name(self):
        return self.display_name

    def set_display_name(self, display_name):
        self.display_name = display_name

    def get_permissions(self):
        return set(self.permissions)

    def set_permissions(self, permissions):
        self.permissions = set(permissions or ())

    def get_redirect_uris(self):
        return list(self.redirect_uris)

    def set_redirect_uris(self, redirect_uris):
        self.redirect_uris = list(redirect_uris or ())

    def get_post_logout_redirect_uris(self):
        return list(self.post_logout_redirect_uris)

    def set_post_logout_redirect_uris(self, post_logout_redirect_uris):
        self.post_logout_redirect_uris = list(post_logout_redirect_uris or ())


class ApplicationDescriptor:
    """A mutable snapshot of an application, used to create applications
    and to update them through
    :meth:`~authclients.applications.ApplicationManager.update_with_descriptor`.

    Unlike an application, ``client_secret`` holds the plain text secret
    and the redirection addresses are :class:`AbsoluteURI` values.
    """

    def __init__(
        self,
        client_id=None,
        client_secret=None,
        client_type=None,
        consent_type=None,
        display_name=None,
        permissions=None,
        redirect_uris=None,
        post_logout_redirect_uris=None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.client_type = client_type
        self.consent_type = consent_type
        self.display_name = display_name
        self.permissions = set(permissions or ())
        self.redirect_uris = [AbsoluteURI.parse(uri) for uri in redirect_uris or ()]
        self.post_logout_redirect_uris = [
            AbsoluteURI.parse(uri) for uri in post_logout_redirect_uris or ()
        ]

    def __repr__(self):
        return f"<ApplicationDescriptor client_id={self.client_id!r}>"
