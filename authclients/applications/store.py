"""
authclients.applications.store
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

The storage contract used by the application manager, and a dict
backed implementation of it.
"""

from __future__ import annotations

import copy
import itertools
from typing import Any
from typing import Callable
from typing import Iterable
from typing import Optional
from typing import Protocol

from authclients.common.security import generate_token
from .models import Application
from .models import ApplicationMixin

#: ``query(applications, state)`` receives every stored application and
#: returns the selected results
Query = Callable[[Iterable[ApplicationMixin], Any], Iterable[Any]]


class ApplicationStore(Protocol):
    """Durable storage for applications.

    Lookups MAY be case-insensitive (many SQL collations are); the manager
    re-checks every match with an exact comparison. A case-insensitive
    :meth:`find_by_client_id` MUST return the exact match when one exists,
    otherwise an existing client identifier would go unnoticed.
    """

    async def count(self) -> int:
        ...

    async def count_matching(self, query: Query) -> int:
        ...

    async def create(self, application: ApplicationMixin) -> None:
        """Persist a new application and assign its identifier."""
        ...

    async def delete(self, application: ApplicationMixin) -> None:
        ...

    async def update(self, application: ApplicationMixin) -> None:
        ...

    async def instantiate(self) -> ApplicationMixin:
        """Return a new, empty and not yet persisted application."""
        ...

    async def find_by_id(self, identifier: str) -> Optional[ApplicationMixin]:
        ...

    async def find_by_client_id(self, identifier: str) -> Optional[ApplicationMixin]:
        ...

    async def find_by_post_logout_redirect_uri(self, address: str) -> list[ApplicationMixin]:
        ...

    async def find_by_redirect_uri(self, address: str) -> list[ApplicationMixin]:
        ...

    async def list(self, count: Optional[int] = None, offset: Optional[int] = None) -> list[ApplicationMixin]:
        ...

    async def query_list(self, query: Query, state: Any = None) -> list[Any]:
        ...

    async def query_get(self, query: Query, state: Any = None) -> Any:
        ...


class MemoryApplicationStore:
    """Keep applications in a dict, keyed by their identifier.

    Stored and returned applications are copies, so a change made to an
    application is only visible to other callers once it is persisted.

    :param case_insensitive: compare client identifiers and addresses
        ignoring case, the way a database with a case-insensitive
        collation would
    :param application_class: model created by :meth:`instantiate`
    """

    IDENTIFIER_LENGTH = 24

    def __init__(self, case_insensitive: bool = False, application_class=Application):
        self.case_insensitive = case_insensitive
        self.application_class = application_class
        self._applications: dict[str, ApplicationMixin] = {}

    def _matches(self, value, expected):
        if value is None:
            return False
        if self.case_insensitive:
            return value.casefold() == expected.casefold()
        return value == expected

    def _all(self):
        return [copy.deepcopy(application) for application in self._applications.values()]

    async def count(self) -> int:
        return len(self._applications)

    async def count_matching(self, query: Query) -> int:
        return sum(1 for _ in query(self._all(), None))

    async def create(self, application: ApplicationMixin) -> None:
        identifier = application.get_id()
        if not identifier:
            identifier = generate_token(self.IDENTIFIER_LENGTH)
            application.set_id(identifier)
        if identifier in self._applications:
            raise KeyError(f"Application '{identifier}' already exists")
        self._applications[identifier] = copy.deepcopy(application)

    async def delete(self, application: ApplicationMixin) -> None:
        identifier = application.get_id()
        if identifier not in self._applications:
            raise KeyError(f"Application '{identifier}' does not exist")
        del self._applications[identifier]

    async def update(self, application: ApplicationMixin) -> None:
        identifier = application.get_id()
        if identifier not in self._applications:
            raise KeyError(f"Application '{identifier}' does not exist")
        self._applications[identifier] = copy.deepcopy(application)

    async def instantiate(self) -> ApplicationMixin:
        return self.application_class()

    async def find_by_id(self, identifier: str) -> Optional[ApplicationMixin]:
        application = self._applications.get(identifier)
        if application is None:
            return None
        return copy.deepcopy(application)

    async def find_by_client_id(self, identifier: str) -> Optional[ApplicationMixin]:
        candidates = [
            application
            for application in self._applications.values()
            if self._matches(application.get_client_id(), identifier)
        ]
        if not candidates:
            return None

        # an exact match wins over one that only matches ignoring case
        for application in candidates:
            if application.get_client_id() == identifier:
                return copy.deepcopy(application)
        return copy.deepcopy(candidates[0])

    async def find_by_post_logout_redirect_uri(self, address: str) -> list[ApplicationMixin]:
        return [
            copy.deepcopy(application)
            for application in self._applications.values()
            if any(self._matches(uri, address) for uri in application.get_post_logout_redirect_uris())
        ]

    async def find_by_redirect_uri(self, address: str) -> list[ApplicationMixin]:
        return [
            copy.deepcopy(application)
            for application in self._applications.values()
            if any(self._matches(uri, address) for uri in application.get_redirect_uris())
        ]

    async def list(self, count: Optional[int] = None, offset: Optional[int] = None) -> list[ApplicationMixin]:
        start = offset or 0
        stop = start + count if count is not None else None
        return list(itertools.islice(self._all(), start, stop))

    async def query_list(self, query: Query, state: Any = None) -> list[Any]:
        return list(query(self._all(), state))

    async def query_get(self, query: Query, state: Any = None) -> Any:
        return next(iter(query(self._all(), state)), None)
