"""
authclients.applications.manager
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Create, update, look up and validate client applications.
"""

import inspect
import logging
from typing import Any
from typing import Optional

from .consts import ClientTypes
from .consts import ConsentTypes
from .consts import Permissions
from .errors import InvalidStateError
from .errors import PreconditionError
from .errors import ValidationError
from .hashing import SecretCodec
from .models import AbsoluteURI
from .models import ApplicationDescriptor
from .permissions import PermissionEvaluator
from .store import ApplicationStore
from .store import Query
from .validator import ApplicationValidator
from .validator import Violation

log = logging.getLogger(__name__)


def _require(value, name, description):
    if value is None:
        raise PreconditionError(description, name)


def _require_text(value, name, description):
    if not value:
        raise PreconditionError(description, name)


class ApplicationManager:
    """Manage the applications saved in an :class:`ApplicationStore`.

    Every application is validated before it is persisted, and client
    secrets are obfuscated before they reach the store::

        store = MemoryApplicationStore()
        manager = ApplicationManager(store)

        application = await manager.create_from_descriptor(ApplicationDescriptor(
            client_id="dashboard",
            client_secret="846B62D0-DEF9-4215-A99D-86E6B8DAB342",
            redirect_uris=["https://dashboard.example.com/callback"],
            permissions={
                Permissions.Endpoints.AUTHORIZATION,
                Permissions.Endpoints.TOKEN,
                Permissions.GrantTypes.AUTHORIZATION_CODE,
            },
        ))

    :param store: the storage of the applications
    :param secret_codec: obfuscates and verifies client secrets
    :param permission_evaluator: decides if a permission is granted
    :param validator: reports the violations of an application
    :param logger: receives the warnings emitted on failed verifications
    """

    def __init__(
        self,
        store: ApplicationStore,
        secret_codec: SecretCodec = None,
        permission_evaluator: PermissionEvaluator = None,
        validator: ApplicationValidator = None,
        logger: logging.Logger = None,
    ):
        self.store = store
        self.logger = logger or log
        self.secret_codec = secret_codec or SecretCodec(logger=self.logger)
        self.permission_evaluator = permission_evaluator or PermissionEvaluator()
        self.validator = validator or ApplicationValidator(store)

    async def count(self) -> int:
        return await self.store.count()

    async def count_matching(self, query: Query) -> int:
        _require(query, "query", "The query cannot be null.")
        return await self.store.count_matching(query)

    async def create(self, application, secret: Optional[str] = None) -> None:
        """Create a new application.

        The client type defaults to ``public`` when no secret is given and
        to ``confidential`` otherwise. The secret is obfuscated before the
        application is saved.

        :param application: the application to create
        :param secret: the plain text client secret, if any
        :raise: PreconditionError, InvalidStateError, ValidationError
        """
        _require(application, "application", "The application cannot be null.")

        if application.get_client_secret():
            raise PreconditionError(
                "The client secret hash cannot be directly set on the application entity.",
                "application",
            )

        if not application.get_client_type():
            application.set_client_type(ClientTypes.CONFIDENTIAL if secret else ClientTypes.PUBLIC)

        if not secret and not self.is_public(application):
            raise InvalidStateError(
                description="A client secret must be provided when creating "
                            "a confidential or hybrid application."
            )

        if secret:
            application.set_client_secret(await self.secret_codec.obfuscate(secret))

        await self._ensure_valid(application)
        await self.store.create(application)

    async def create_from_descriptor(self, descriptor: ApplicationDescriptor):
        """Create a new application from a descriptor and return it.

        ``descriptor.client_secret`` is the plain text secret, it is
        obfuscated like in :meth:`create`.
        """
        _require(descriptor, "descriptor", "The descriptor cannot be null.")

        application = await self.store.instantiate()
        if application is None:
            raise InvalidStateError(description="An error occurred while trying to create a new application.")

        self.populate(application, descriptor)

        # create() refuses applications carrying a secret, hand it over instead
        secret = application.get_client_secret()
        if secret:
            application.set_client_secret(None)
            await self.create(application, secret)
        else:
            await self.create(application)
        return application

    async def delete(self, application) -> None:
        _require(application, "application", "The application cannot be null.")
        await self.store.delete(application)

    async def find_by_id(self, identifier: str):
        _require_text(identifier, "identifier", "The identifier cannot be null or empty.")
        return await self.store.find_by_id(identifier)

    async def find_by_client_id(self, identifier: str):
        """Find an application by its client identifier. The comparison is
        case-sensitive whatever the collation used by the store.
        """
        _require_text(identifier, "identifier", "The identifier cannot be null or empty.")

        application = await self.store.find_by_client_id(identifier)
        if application is None or application.get_client_id() != identifier:
            return None
        return application

    async def find_by_post_logout_redirect_uri(self, address: str) -> list:
        _require_text(address, "address", "The address cannot be null or empty.")

        applications = await self.store.find_by_post_logout_redirect_uri(address)
        return [
            application
            for application in applications
            for uri in application.get_post_logout_redirect_uris()
            if uri == address
        ]

    async def find_by_redirect_uri(self, address: str) -> list:
        _require_text(address, "address", "The address cannot be null or empty.")

        applications = await self.store.find_by_redirect_uri(address)
        return [
            application
            for application in applications
            for uri in application.get_redirect_uris()
            if uri == address
        ]

    async def list_applications(self, count: Optional[int] = None, offset: Optional[int] = None) -> list:
        return await self.store.list(count, offset)

    async def query_list(self, query: Query, state: Any = None) -> list:
        _require(query, "query", "The query cannot be null.")
        return await self.store.query_list(query, state)

    async def query_get(self, query: Query, state: Any = None) -> Any:
        _require(query, "query", "The query cannot be null.")
        return await self.store.query_get(query, state)

    def get_client_id(self, application) -> Optional[str]:
        _require(application, "application", "The application cannot be null.")
        return application.get_client_id()

    def get_client_type(self, application) -> Optional[str]:
        """Return the client type, or None when it is not set.

        :raise: InvalidStateError if the stored client type is unknown
        """
        _require(application, "application", "The application cannot be null.")

        client_type = application.get_client_type()
        if not client_type:
            return None

        if client_type.lower() not in ClientTypes.ALL:
            raise InvalidStateError(
                description="Only 'confidential', 'hybrid' or 'public' applications are "
                            "supported by the default application manager."
            )
        return client_type

    def get_consent_type(self, application) -> str:
        _require(application, "application", "The application cannot be null.")
        return application.get_consent_type() or ConsentTypes.EXPLICIT

    def get_display_name(self, application) -> Optional[str]:
        _require(application, "application", "The application cannot be null.")
        return application.get_display_name()

    def get_id(self, application) -> Optional[str]:
        _require(application, "application", "The application cannot be null.")
        return application.get_id()

    def get_permissions(self, application) -> set:
        _require(application, "application", "The application cannot be null.")
        return set(application.get_permissions())

    def get_post_logout_redirect_uris(self, application) -> list:
        _require(application, "application", "The application cannot be null.")
        return list(application.get_post_logout_redirect_uris())

    def get_redirect_uris(self, application) -> list:
        _require(application, "application", "The application cannot be null.")
        return list(application.get_redirect_uris())

    def has_permission(self, application, permission: str) -> bool:
        """Check if ``permission`` was granted to the application, explicitly
        or by default. See :class:`PermissionEvaluator`.
        """
        _require(application, "application", "The application cannot be null.")
        _require_text(permission, "permission", "The permission name cannot be null or empty.")
        return self.permission_evaluator.check(application, permission)

    def is_confidential(self, application) -> bool:
        client_type = self.get_client_type(application)
        if not client_type:
            return False
        return client_type.lower() == ClientTypes.CONFIDENTIAL

    def is_hybrid(self, application) -> bool:
        client_type = self.get_client_type(application)
        if not client_type:
            return False
        return client_type.lower() == ClientTypes.HYBRID

    def is_public(self, application) -> bool:
        # applications without an explicit type are public
        client_type = self.get_client_type(application)
        if not client_type:
            return True
        return client_type.lower() == ClientTypes.PUBLIC

    async def update(self, application) -> None:
        """Validate and save the changes made to an application. The client
        secret is left untouched.
        """
        _require(application, "application", "The application cannot be null.")
        await self._ensure_valid(application)
        await self.store.update(application)

    async def update_with_secret(self, application, secret: Optional[str]) -> None:
        """Replace the client secret and save the application. An empty
        ``secret`` removes the client secret.
        """
        _require(application, "application", "The application cannot be null.")

        if not secret:
            application.set_client_secret(None)
        else:
            application.set_client_secret(await self.secret_codec.obfuscate(secret))

        await self.update(application)

    async def update_with_descriptor(self, application, operation) -> None:
        """Update an application through a descriptor::

            def rename(descriptor):
                descriptor.display_name = "Dashboard"

            await manager.update_with_descriptor(application, rename)

        ``operation`` receives a descriptor filled from the application, it
        MAY be a coroutine function. When it changes
        ``descriptor.client_secret``, the new value is obfuscated as a
        plain text secret.

        :raise: PreconditionError, ValidationError
        """
        _require(application, "application", "The application cannot be null.")
        _require(operation, "operation", "The operation cannot be null.")

        secret = application.get_client_secret()

        descriptor = ApplicationDescriptor(
            client_id=application.get_client_id(),
            client_secret=secret,
            client_type=application.get_client_type(),
            consent_type=application.get_consent_type(),
            display_name=application.get_display_name(),
            permissions=application.get_permissions(),
            redirect_uris=self._parse_addresses(application, application.get_redirect_uris()),
            post_logout_redirect_uris=self._parse_addresses(
                application, application.get_post_logout_redirect_uris()
            ),
        )

        result = operation(descriptor)
        if inspect.isawaitable(result):
            await result

        self.populate(application, descriptor)

        comparand = application.get_client_secret()
        if (secret or None) != (comparand or None):
            await self.update_with_secret(application, comparand)
        else:
            await self.update(application)

    async def validate(self, application) -> list[Violation]:
        """Return the violations of the application, an empty list when it
        is consistent.
        """
        _require(application, "application", "The application cannot be null.")
        return await self.validator.validate(application)

    async def validate_client_secret(self, application, secret: str) -> bool:
        """Check the plain text ``secret`` presented by a client. Public
        applications cannot authenticate with a secret.
        """
        _require(application, "application", "The application cannot be null.")

        if self.is_public(application):
            self.logger.warning("Client authentication cannot be enforced for public applications.")
            return False

        value = application.get_client_secret()
        if not value:
            self.logger.warning(
                "Client authentication failed for %s because no client secret "
                "was associated with the application.",
                application.get_client_id(),
            )
            return False

        if not await self.secret_codec.verify(secret, value):
            self.logger.warning("Client authentication failed for %s.", application.get_client_id())
            return False

        return True

    async def validate_post_logout_redirect_uri(self, address: str) -> bool:
        """Check that ``address`` is registered by an application allowed to
        use the logout endpoint.
        """
        _require_text(address, "address", "The address cannot be null or empty.")

        for application in await self.find_by_post_logout_redirect_uri(address):
            if self.has_permission(application, Permissions.Endpoints.LOGOUT):
                return True

        self.logger.warning(
            "Client validation failed because '%s' was not a valid post_logout_redirect_uri.",
            address,
        )
        return False

    def validate_redirect_uri(self, application, address: str) -> bool:
        """Check that ``address`` is one of the redirect URIs of the
        application, using a case-sensitive simple string comparison.
        """
        _require(application, "application", "The application cannot be null.")
        _require_text(address, "address", "The address cannot be null or empty.")

        if address in application.get_redirect_uris():
            return True

        self.logger.warning(
            "Client validation failed because '%s' was not a valid redirect_uri for %s.",
            address,
            application.get_client_id(),
        )
        return False

    def populate(self, application, descriptor: ApplicationDescriptor) -> None:
        """Copy every field of the descriptor onto the application."""
        _require(application, "application", "The application cannot be null.")
        _require(descriptor, "descriptor", "The descriptor cannot be null.")

        application.set_client_id(descriptor.client_id)
        application.set_client_secret(descriptor.client_secret)
        application.set_client_type(descriptor.client_type)
        application.set_consent_type(descriptor.consent_type)
        application.set_display_name(descriptor.display_name)
        application.set_permissions(set(descriptor.permissions))
        application.set_post_logout_redirect_uris([str(uri) for uri in descriptor.post_logout_redirect_uris])
        application.set_redirect_uris([str(uri) for uri in descriptor.redirect_uris])

    async def _ensure_valid(self, application) -> None:
        violations = await self.validator.validate(application)
        if violations:
            raise ValidationError(violations, application)

    def _parse_addresses(self, application, addresses) -> list[AbsoluteURI]:
        uris = []
        for address in addresses:
            try:
                uris.append(AbsoluteURI.parse(address))
            except ValueError:
                if not address:
                    description = "Callback URLs cannot be null or empty."
                else:
                    description = "Callback URLs must be valid absolute URLs."
                self.logger.warning(
                    "The callback URL '%s' of %s could not be parsed.",
                    address,
                    application.get_client_id(),
                )
                raise ValidationError([Violation("invalid_redirect_uri", description)], application)
        return uris
