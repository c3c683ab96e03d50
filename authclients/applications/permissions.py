"""
authclients.applications.permissions
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Decide whether an application is allowed to use an endpoint, a grant
type or a scope.
"""

from .consts import Permissions
from .errors import PreconditionError

Endpoints = Permissions.Endpoints
GrantTypes = Permissions.GrantTypes
Prefixes = Permissions.Prefixes


class PermissionEvaluator:
    """Evaluate a permission against the permissions granted to an
    application.

    An explicitly granted permission is always allowed. Endpoint, grant
    type and scope permissions are open by default: as long as no
    permission of a category is granted, the whole category is allowed.
    Once one permission of a category is granted, the category becomes an
    allow-list. Grant types and scopes are only implied when the endpoints
    they need are allowed.

    All comparisons are ordinal, ``"scope:Email"`` is not ``"scope:email"``.
    """

    #: grant type permissions and the endpoints they require. Grant types
    #: missing from this mapping require the token endpoint.
    GRANT_TYPE_ENDPOINTS = {
        GrantTypes.AUTHORIZATION_CODE: (Endpoints.AUTHORIZATION, Endpoints.TOKEN),
        GrantTypes.IMPLICIT: (Endpoints.AUTHORIZATION,),
        GrantTypes.CLIENT_CREDENTIALS: (Endpoints.TOKEN,),
        GrantTypes.PASSWORD: (Endpoints.TOKEN,),
        GrantTypes.REFRESH_TOKEN: (Endpoints.TOKEN,),
    }
    DEFAULT_GRANT_TYPE_ENDPOINTS = (Endpoints.TOKEN,)

    #: a scope is implied when any of these endpoints is allowed
    SCOPE_ENDPOINTS = (Endpoints.AUTHORIZATION, Endpoints.TOKEN)

    def check(self, application, permission: str) -> bool:
        return self.has_permission(application.get_permissions(), permission)

    def has_permission(self, permissions, permission: str) -> bool:
        """
        :param permissions: the permissions granted to the application
        :param permission: the permission to evaluate
        :return: if the permission is granted or implied
        """
        if not permission:
            raise PreconditionError("The permission name cannot be null or empty.", "permission")

        permissions = frozenset(permissions or ())

        if permission.startswith(Prefixes.ENDPOINT):
            return self.has_endpoint_permission(permissions, permission)
        if permission.startswith(Prefixes.GRANT_TYPE):
            return self.has_grant_type_permission(permissions, permission)
        if permission.startswith(Prefixes.SCOPE):
            return self.has_scope_permission(permissions, permission)
        return permission in permissions

    def has_endpoint_permission(self, permissions: frozenset, permission: str) -> bool:
        if not permissions or permission in permissions:
            return True
        return not _has_prefix(permissions, Prefixes.ENDPOINT)

    def has_grant_type_permission(self, permissions: frozenset, permission: str) -> bool:
        if not permissions or permission in permissions:
            return True

        # an explicit allow-list of grant types is in effect
        if _has_prefix(permissions, Prefixes.GRANT_TYPE):
            return False

        endpoints = self.GRANT_TYPE_ENDPOINTS.get(permission, self.DEFAULT_GRANT_TYPE_ENDPOINTS)
        return all(self.has_endpoint_permission(permissions, endpoint) for endpoint in endpoints)

    def has_scope_permission(self, permissions: frozenset, permission: str) -> bool:
        if not permissions or permission in permissions:
            return True

        if _has_prefix(permissions, Prefixes.SCOPE):
            return False

        return any(self.has_endpoint_permission(permissions, endpoint) for endpoint in self.SCOPE_ENDPOINTS)


def _has_prefix(permissions, prefix):
    return any(permission.startswith(prefix) for permission in permissions)
