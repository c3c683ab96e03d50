"""authclients.applications.
~~~~~~~~~~~~~~~~~~~~~~~~~~

This module manages the client applications registered on an OAuth 2.0
and OpenID Connect authorization server: client types, permissions,
client secrets and redirection endpoints.

https://tools.ietf.org/html/rfc6749#section-2
"""

from .consts import ClientTypes
from .consts import ConsentTypes
from .consts import Permissions
from .errors import InvalidStateError
from .errors import PreconditionError
from .errors import ValidationError
from .hashing import PBKDF2SecretHasher
from .hashing import SecretCodec
from .hashing import SecretHasher
from .manager import ApplicationManager
from .models import AbsoluteURI
from .models import Application
from .models import ApplicationDescriptor
from .models import ApplicationMixin
from .permissions import PermissionEvaluator
from .store import ApplicationStore
from .store import MemoryApplicationStore
from .validator import ApplicationValidator
from .validator import Violation

__all__ = [
    "ClientTypes",
    "ConsentTypes",
    "Permissions",
    "PreconditionError",
    "ValidationError",
    "InvalidStateError",
    "SecretHasher",
    "PBKDF2SecretHasher",
    "SecretCodec",
    "AbsoluteURI",
    "ApplicationMixin",
    "Application",
    "ApplicationDescriptor",
    "ApplicationStore",
    "MemoryApplicationStore",
    "PermissionEvaluator",
    "ApplicationValidator",
    "Violation",
    "ApplicationManager",
]
