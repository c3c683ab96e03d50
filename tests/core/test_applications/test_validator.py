import unittest

import pytest

from authclients.applications import Application
from authclients.applications import ApplicationValidator
from authclients.applications import MemoryApplicationStore
from authclients.applications import Permissions
from authclients.applications import PreconditionError
from authclients.applications import Violation

Endpoints = Permissions.Endpoints
GrantTypes = Permissions.GrantTypes


def create_application(**kwargs):
    kwargs.setdefault("client_id", "dashboard")
    kwargs.setdefault("client_type", "public")
    return Application(**kwargs)


class ApplicationValidatorTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = MemoryApplicationStore()
        self.validator = ApplicationValidator(self.store)

    async def assert_violations(self, application, *errors):
        violations = await self.validator.validate(application)
        assert [violation.error for violation in violations] == list(errors)
        return violations

    async def test_valid_application(self):
        await self.assert_violations(create_application())
        await self.assert_violations(create_application(client_type="confidential", client_secret="hash"))
        await self.assert_violations(create_application(client_type="hybrid"))
        await self.assert_violations(create_application(client_type="hybrid", client_secret="hash"))

    async def test_null_application(self):
        with pytest.raises(PreconditionError):
            await self.validator.validate(None)

    async def test_empty_client_id(self):
        violations = await self.assert_violations(create_application(client_id=""), "invalid_client_id")
        assert violations[0].description == "The client identifier cannot be null or empty."

    async def test_duplicate_client_id(self):
        await self.store.create(create_application())

        violations = await self.assert_violations(create_application(), "duplicate_client_id")
        assert str(violations[0]) == "An application with the same client identifier already exists."

    async def test_same_application_is_not_a_duplicate(self):
        application = create_application()
        await self.store.create(application)
        await self.assert_violations(application)

    async def test_duplicate_client_id_is_case_sensitive(self):
        self.store.case_insensitive = True
        await self.store.create(create_application(client_id="alice"))
        await self.assert_violations(create_application(client_id="Alice"))
        await self.assert_violations(create_application(client_id="alice"), "duplicate_client_id")

    async def test_client_type(self):
        await self.assert_violations(create_application(client_type=None), "invalid_client_type")
        await self.assert_violations(create_application(client_type="native"), "unsupported_client_type")
        # the client type is case-insensitive
        await self.assert_violations(create_application(client_type="Public"))
        await self.assert_violations(
            create_application(client_type="CONFIDENTIAL", client_secret="hash")
        )

    async def test_client_secret(self):
        violations = await self.assert_violations(
            create_application(client_type="confidential"), "missing_client_secret"
        )
        assert "confidential" in violations[0].description

        violations = await self.assert_violations(
            create_application(client_type="public", client_secret="hash"), "unexpected_client_secret"
        )
        assert "public" in violations[0].description

    async def test_redirect_uris(self):
        await self.assert_violations(create_application(
            redirect_uris=["https://client.example.com/cb", "com.example.app:/cb"],
            post_logout_redirect_uris=["https://client.example.com/logout"],
        ))

        violations = await self.assert_violations(
            create_application(redirect_uris=[""]), "invalid_redirect_uri"
        )
        assert violations[0].description == "Callback URLs cannot be null or empty."

        violations = await self.assert_violations(
            create_application(redirect_uris=["/cb"]), "invalid_redirect_uri"
        )
        assert violations[0].description == "Callback URLs must be valid absolute URLs."

        violations = await self.assert_violations(
            create_application(redirect_uris=["https://a/cb#frag"]), "invalid_redirect_uri"
        )
        assert violations[0].description == "Callback URLs cannot contain a fragment."

    async def test_first_invalid_redirect_uri_only(self):
        application = create_application(
            post_logout_redirect_uris=["https://client.example.com/logout#frag"],
            redirect_uris=["", "/cb"],
        )
        violations = await self.assert_violations(application, "invalid_redirect_uri")
        # post logout redirect URIs are checked first
        assert violations[0].description == "Callback URLs cannot contain a fragment."

    async def test_endpoint_permissions_not_restricted(self):
        await self.assert_violations(create_application(permissions={
            GrantTypes.AUTHORIZATION_CODE,
            GrantTypes.CLIENT_CREDENTIALS,
            GrantTypes.IMPLICIT,
            GrantTypes.PASSWORD,
            GrantTypes.REFRESH_TOKEN,
        }))

    async def test_authorization_code_requires_authorization_endpoint(self):
        violations = await self.assert_violations(
            create_application(permissions={GrantTypes.AUTHORIZATION_CODE, Endpoints.TOKEN}),
            "missing_endpoint_permission",
        )
        assert violations[0].description == (
            "The authorization code flow permission requires adding the authorization endpoint permission."
        )

    async def test_authorization_code_requires_token_endpoint(self):
        violations = await self.assert_violations(
            create_application(permissions={GrantTypes.AUTHORIZATION_CODE, Endpoints.AUTHORIZATION}),
            "missing_endpoint_permission",
        )
        assert "token endpoint" in violations[0].description

    async def test_grant_types_require_endpoints(self):
        application = create_application(permissions={
            Endpoints.LOGOUT,
            GrantTypes.AUTHORIZATION_CODE,
            GrantTypes.CLIENT_CREDENTIALS,
            GrantTypes.IMPLICIT,
            GrantTypes.PASSWORD,
            GrantTypes.REFRESH_TOKEN,
        })
        violations = await self.assert_violations(application, *["missing_endpoint_permission"] * 6)
        descriptions = [violation.description for violation in violations]
        assert descriptions[2].startswith("The client credentials flow")
        assert descriptions[3].startswith("The implicit flow")
        assert descriptions[4].startswith("The password flow")
        assert descriptions[5].startswith("The refresh token flow")

    async def test_collects_violations(self):
        await self.store.create(create_application())
        application = create_application(
            client_type="confidential",
            redirect_uris=["https://a/cb#frag"],
            permissions={Endpoints.TOKEN, GrantTypes.IMPLICIT},
        )
        await self.assert_violations(
            application,
            "duplicate_client_id",
            "missing_client_secret",
            "invalid_redirect_uri",
            "missing_endpoint_permission",
        )


def test_violation():
    violation = Violation("invalid_client_id", "The client identifier cannot be null or empty.")
    assert violation == Violation("invalid_client_id", "The client identifier cannot be null or empty.")
    assert violation != Violation("duplicate_client_id", "The client identifier cannot be null or empty.")
    assert str(violation) == "The client identifier cannot be null or empty."
    assert "invalid_client_id" in repr(violation)
