import unittest

import pytest

from authclients.applications import Application
from authclients.applications import Permissions
from authclients.applications import PermissionEvaluator
from authclients.applications import PreconditionError

Endpoints = Permissions.Endpoints
GrantTypes = Permissions.GrantTypes
Scopes = Permissions.Scopes


class EndpointPermissionTest(unittest.TestCase):
    def setUp(self):
        self.evaluator = PermissionEvaluator()

    def test_open_by_default(self):
        assert self.evaluator.has_permission(set(), Endpoints.TOKEN)
        assert self.evaluator.has_permission(None, Endpoints.LOGOUT)
        assert self.evaluator.has_permission({"custom"}, Endpoints.TOKEN)
        assert self.evaluator.has_permission({Scopes.EMAIL}, Endpoints.TOKEN)

    def test_explicit_permission(self):
        assert self.evaluator.has_permission({Endpoints.TOKEN}, Endpoints.TOKEN)

    def test_allow_list(self):
        permissions = {Endpoints.AUTHORIZATION}
        assert self.evaluator.has_permission(permissions, Endpoints.AUTHORIZATION)
        assert not self.evaluator.has_permission(permissions, Endpoints.TOKEN)
        assert not self.evaluator.has_permission(permissions, Endpoints.LOGOUT)

    def test_ordinal_comparison(self):
        assert not self.evaluator.has_permission({Endpoints.TOKEN}, "endpoint:Token")


class GrantTypePermissionTest(unittest.TestCase):
    def setUp(self):
        self.evaluator = PermissionEvaluator()

    def test_open_by_default(self):
        for grant_type in [
            GrantTypes.AUTHORIZATION_CODE,
            GrantTypes.CLIENT_CREDENTIALS,
            GrantTypes.IMPLICIT,
            GrantTypes.PASSWORD,
            GrantTypes.REFRESH_TOKEN,
            "grant_type:urn:ietf:params:oauth:grant-type:device_code",
        ]:
            assert self.evaluator.has_permission(set(), grant_type)

    def test_allow_list(self):
        permissions = {GrantTypes.AUTHORIZATION_CODE}
        assert self.evaluator.has_permission(permissions, GrantTypes.AUTHORIZATION_CODE)
        assert not self.evaluator.has_permission(permissions, GrantTypes.REFRESH_TOKEN)

    def test_explicit_permission_wins_over_endpoints(self):
        permissions = {Endpoints.AUTHORIZATION, GrantTypes.PASSWORD}
        assert self.evaluator.has_permission(permissions, GrantTypes.PASSWORD)

    def test_authorization_code_requires_both_endpoints(self):
        permissions = {Endpoints.AUTHORIZATION, Endpoints.TOKEN}
        assert self.evaluator.has_permission(permissions, GrantTypes.AUTHORIZATION_CODE)

        assert not self.evaluator.has_permission({Endpoints.AUTHORIZATION}, GrantTypes.AUTHORIZATION_CODE)
        assert not self.evaluator.has_permission({Endpoints.TOKEN}, GrantTypes.AUTHORIZATION_CODE)

    def test_implicit_requires_authorization_endpoint(self):
        assert self.evaluator.has_permission({Endpoints.AUTHORIZATION}, GrantTypes.IMPLICIT)
        assert not self.evaluator.has_permission({Endpoints.TOKEN}, GrantTypes.IMPLICIT)

    def test_token_grant_types_require_token_endpoint(self):
        for grant_type in [
            GrantTypes.CLIENT_CREDENTIALS,
            GrantTypes.PASSWORD,
            GrantTypes.REFRESH_TOKEN,
            "grant_type:urn:ietf:params:oauth:grant-type:device_code",
        ]:
            assert self.evaluator.has_permission({Endpoints.TOKEN}, grant_type)
            assert not self.evaluator.has_permission({Endpoints.AUTHORIZATION}, grant_type)

    def test_unrestricted_endpoints(self):
        # no endpoint permission, every endpoint is allowed
        assert self.evaluator.has_permission({Scopes.EMAIL}, GrantTypes.AUTHORIZATION_CODE)
        assert self.evaluator.has_permission({"custom"}, GrantTypes.IMPLICIT)


class ScopePermissionTest(unittest.TestCase):
    def setUp(self):
        self.evaluator = PermissionEvaluator()

    def test_open_by_default(self):
        assert self.evaluator.has_permission(set(), Scopes.EMAIL)
        assert self.evaluator.has_permission({Endpoints.TOKEN}, Scopes.EMAIL)
        assert self.evaluator.has_permission({Endpoints.AUTHORIZATION}, Scopes.PROFILE)

    def test_allow_list(self):
        permissions = {Scopes.EMAIL}
        assert self.evaluator.has_permission(permissions, Scopes.EMAIL)
        assert not self.evaluator.has_permission(permissions, Scopes.PROFILE)

    def test_requires_authorization_or_token_endpoint(self):
        assert not self.evaluator.has_permission({Endpoints.LOGOUT}, Scopes.EMAIL)
        assert not self.evaluator.has_permission({Endpoints.INTROSPECTION, Endpoints.REVOCATION}, Scopes.EMAIL)
        assert self.evaluator.has_permission({Endpoints.LOGOUT, Endpoints.TOKEN}, Scopes.EMAIL)


class PlainPermissionTest(unittest.TestCase):
    def setUp(self):
        self.evaluator = PermissionEvaluator()

    def test_must_be_granted(self):
        assert not self.evaluator.has_permission(set(), "custom")
        assert not self.evaluator.has_permission({Endpoints.TOKEN}, "custom")
        assert self.evaluator.has_permission({"custom"}, "custom")

    def test_empty_name(self):
        with pytest.raises(PreconditionError):
            self.evaluator.has_permission(set(), "")
        with pytest.raises(PreconditionError):
            self.evaluator.has_permission(set(), None)


def test_check_application():
    evaluator = PermissionEvaluator()
    application = Application(permissions={Endpoints.AUTHORIZATION})
    assert evaluator.check(application, Endpoints.AUTHORIZATION)
    assert not evaluator.check(application, Endpoints.TOKEN)
    assert evaluator.check(Application(), Endpoints.TOKEN)


def test_custom_grant_type_endpoints():
    class DeviceFlowEvaluator(PermissionEvaluator):
        GRANT_TYPE_ENDPOINTS = {
            **PermissionEvaluator.GRANT_TYPE_ENDPOINTS,
            "grant_type:device_code": ("endpoint:device", Endpoints.TOKEN),
        }

    evaluator = DeviceFlowEvaluator()
    assert not evaluator.has_permission({Endpoints.TOKEN}, "grant_type:device_code")
    assert evaluator.has_permission({Endpoints.TOKEN, "endpoint:device"}, "grant_type:device_code")
