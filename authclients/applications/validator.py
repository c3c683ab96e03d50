"""
authclients.applications.validator
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Check that an application is consistent before it is persisted.
"""

from authclients.common.urls import has_fragment
from authclients.common.urls import is_well_formed_uri
from .consts import ClientTypes
from .consts import Permissions
from .errors import PreconditionError

Endpoints = Permissions.Endpoints
GrantTypes = Permissions.GrantTypes


class Violation:
    """A single inconsistency reported by :class:`ApplicationValidator`.

    :param error: short-string code, e.g. ``duplicate_client_id``
    :param description: human readable explanation
    """

    def __init__(self, error: str, description: str):
        self.error = error
        self.description = description

    def __eq__(self, other):
        if not isinstance(other, Violation):
            return NotImplemented
        return self.error == other.error and self.description == other.description

    def __hash__(self):
        return hash((self.error, self.description))

    def __str__(self):
        return self.description

    def __repr__(self):
        return f'<Violation "{self.error}": {self.description!r}>'


class ApplicationValidator:
    """Collect the violations of an application.

    Violations are returned, never raised, so callers can report all of
    them at once. The redirection addresses are the exception: the scan
    stops at the first invalid address.

    :param store: the :class:`~authclients.applications.ApplicationStore`
        used to detect duplicated client identifiers
    """

    #: grant type permissions, the endpoint permission each one requires,
    #: and the description reported when it is missing
    GRANT_TYPE_REQUIREMENTS = [
        (
            GrantTypes.AUTHORIZATION_CODE,
            Endpoints.AUTHORIZATION,
            "The authorization code flow permission requires adding the authorization endpoint permission.",
        ),
        (
            GrantTypes.AUTHORIZATION_CODE,
            Endpoints.TOKEN,
            "The authorization code flow permission requires adding the token endpoint permission.",
        ),
        (
            GrantTypes.CLIENT_CREDENTIALS,
            Endpoints.TOKEN,
            "The client credentials flow permission requires adding the token endpoint permission.",
        ),
        (
            GrantTypes.IMPLICIT,
            Endpoints.AUTHORIZATION,
            "The implicit flow permission requires adding the authorization endpoint permission.",
        ),
        (
            GrantTypes.PASSWORD,
            Endpoints.TOKEN,
            "The password flow permission requires adding the token endpoint permission.",
        ),
        (
            GrantTypes.REFRESH_TOKEN,
            Endpoints.TOKEN,
            "The refresh token flow permission requires adding the token endpoint permission.",
        ),
    ]

    def __init__(self, store):
        self.store = store

    async def validate(self, application) -> list[Violation]:
        if application is None:
            raise PreconditionError("The application cannot be null.", "application")

        violations = await self.validate_client_id(application)
        violations.extend(self.validate_client_type(application))
        violations.extend(self.validate_redirect_uris(application))
        violations.extend(self.validate_permissions(application))
        return violations

    async def validate_client_id(self, application) -> list[Violation]:
        """The client identifier is REQUIRED and MUST be unique."""
        identifier = application.get_client_id()
        if not identifier:
            return [Violation("invalid_client_id", "The client identifier cannot be null or empty.")]

        # the store may match ignoring case, only an exact match is a duplicate
        other = await self.store.find_by_client_id(identifier)
        if (
            other is not None
            and other.get_client_id() == identifier
            and other.get_id() != application.get_id()
        ):
            return [Violation("duplicate_client_id", "An application with the same client identifier already exists.")]
        return []

    def validate_client_type(self, application) -> list[Violation]:
        """The client type is REQUIRED. Confidential applications MUST have
        a client secret, public applications MUST NOT.
        """
        client_type = application.get_client_type()
        if not client_type:
            return [Violation("invalid_client_type", "The client type cannot be null or empty.")]

        client_type = client_type.lower()
        if client_type not in ClientTypes.ALL:
            return [Violation(
                "unsupported_client_type",
                "Only 'confidential', 'hybrid' or 'public' applications are "
                "supported by the default application manager.",
            )]

        secret = application.get_client_secret()
        if not secret and client_type == ClientTypes.CONFIDENTIAL:
            return [Violation(
                "missing_client_secret",
                "The client secret cannot be null or empty for a confidential application.",
            )]
        if secret and client_type == ClientTypes.PUBLIC:
            return [Violation(
                "unexpected_client_secret",
                "A client secret cannot be associated with a public application.",
            )]
        return []

    def validate_redirect_uris(self, application) -> list[Violation]:
        """Every post logout redirect URI and redirect URI MUST be an
        absolute URI without a fragment, see :rfc:`6749#section-3.1.2`.
        Only the first invalid address is reported.
        """
        addresses = list(application.get_post_logout_redirect_uris()) + list(application.get_redirect_uris())
        for address in addresses:
            if not address:
                return [Violation("invalid_redirect_uri", "Callback URLs cannot be null or empty.")]

            if not is_well_formed_uri(address):
                return [Violation("invalid_redirect_uri", "Callback URLs must be valid absolute URLs.")]

            if has_fragment(address):
                return [Violation("invalid_redirect_uri", "Callback URLs cannot contain a fragment.")]
        return []

    def validate_permissions(self, application) -> list[Violation]:
        """Grant type permissions require the endpoint permissions of their
        flow, once the application restricts its endpoints.
        """
        permissions = application.get_permissions()
        if not any(permission.startswith(Permissions.Prefixes.ENDPOINT) for permission in permissions):
            return []

        return [
            Violation("missing_endpoint_permission", description)
            for grant_type, endpoint, description in self.GRANT_TYPE_REQUIREMENTS
            if grant_type in permissions and endpoint not in permissions
        ]
