"""Tests unitaires pour le module de securite.

Ce module teste l'extraction du token, la traduction des echecs de
verification, la resolution de l'identite courante et le controle d'acces
base sur les roles.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from genedetective.core.exceptions import AuthError, AuthFailure, AuthzError
from genedetective.core.security import (
    CurrentUser,
    authorize,
    extract_token,
    get_token_claims,
    require_roles,
    resolve_identity,
)
from genedetective.core.tokens import TokenClaims, issue_token
from genedetective.models import Role

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def claims():
    return TokenClaims(
        user_id=1,
        email="a@x.com",
        role=1,
        expires_at=datetime.now(UTC) + timedelta(hours=1),
    )


@pytest.fixture
def patient_user():
    return CurrentUser(id=1, full_name="Ada Patient", email="a@x.com", role=Role.PATIENT)


@pytest.fixture
def counselor_user():
    return CurrentUser(id=2, full_name="Carl Counselor", email="c@x.com", role=Role.COUNSELOR)


# =============================================================================
# extract_token
# =============================================================================


class TestExtractToken:
    @pytest.mark.asyncio
    async def test_bearer_credentials(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="abc.def.ghi")

        assert await extract_token(credentials) == "abc.def.ghi"

    @pytest.mark.asyncio
    async def test_missing_header(self):
        with pytest.raises(AuthError) as exc_info:
            await extract_token(None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.reason is AuthFailure.NO_TOKEN
        assert exc_info.value.detail == "Access denied. No token provided."

    @pytest.mark.asyncio
    async def test_empty_credentials(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="")

        with pytest.raises(AuthError) as exc_info:
            await extract_token(credentials)

        assert exc_info.value.reason is AuthFailure.NO_TOKEN


# =============================================================================
# get_token_claims
# =============================================================================


class TestGetTokenClaims:
    @pytest.mark.asyncio
    async def test_valid_token(self):
        claims = await get_token_claims(issue_token(5, "a@x.com", 2))

        assert claims.user_id == 5
        assert claims.role == 2

    @pytest.mark.asyncio
    async def test_expired_token_maps_to_expired_reason(self):
        token = issue_token(5, "a@x.com", 1, expires_delta=timedelta(seconds=-1))

        with pytest.raises(AuthError) as exc_info:
            await get_token_claims(token)

        assert exc_info.value.reason is AuthFailure.EXPIRED_TOKEN
        assert exc_info.value.detail == "Invalid token."

    @pytest.mark.asyncio
    async def test_bad_signature_maps_to_bad_signature_reason(self):
        header, payload, signature = issue_token(5, "a@x.com", 1).split(".")
        forged = ".".join([header, payload, ("A" if signature[0] != "A" else "B") + signature[1:]])

        with pytest.raises(AuthError) as exc_info:
            await get_token_claims(forged)

        assert exc_info.value.reason is AuthFailure.BAD_SIGNATURE
        assert exc_info.value.detail == "Invalid token."

    @pytest.mark.asyncio
    async def test_garbage_maps_to_malformed_reason(self):
        with pytest.raises(AuthError) as exc_info:
            await get_token_claims("garbage")

        assert exc_info.value.reason is AuthFailure.MALFORMED_TOKEN


# =============================================================================
# resolve_identity
# =============================================================================


class TestResolveIdentity:
    @pytest.mark.asyncio
    async def test_role_comes_from_stored_row(self, claims):
        """Le rôle relu en base fait foi, pas celui du token."""
        dal = AsyncMock()
        dal.fetch_one.return_value = {
            "id": 1,
            "full_name": "Ada Patient",
            "email": "stored@x.com",
            "user_role": 2,
        }

        user = await resolve_identity(dal, claims)

        assert user.role is Role.COUNSELOR
        assert user.email == "stored@x.com"
        dal.fetch_one.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_user(self, claims):
        dal = AsyncMock()
        dal.fetch_one.return_value = None

        with pytest.raises(AuthError) as exc_info:
            await resolve_identity(dal, claims)

        assert exc_info.value.reason is AuthFailure.UNKNOWN_IDENTITY
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_unsupported_stored_role(self, claims):
        dal = AsyncMock()
        dal.fetch_one.return_value = {
            "id": 1,
            "full_name": "Ada",
            "email": "a@x.com",
            "user_role": 3,
        }

        with pytest.raises(AuthError):
            await resolve_identity(dal, claims)


# =============================================================================
# authorize / require_roles
# =============================================================================


class TestAuthorize:
    @pytest.mark.parametrize(
        "role,allowed",
        [
            (Role.PATIENT, [Role.PATIENT]),
            (Role.COUNSELOR, [Role.PATIENT, Role.COUNSELOR]),
            (4, [Role.RESEARCHER]),
        ],
    )
    def test_allowed(self, role, allowed):
        authorize(role, allowed)

    @pytest.mark.parametrize(
        "role,allowed",
        [
            (Role.PATIENT, [Role.COUNSELOR]),
            (Role.RESEARCHER, [Role.PATIENT, Role.COUNSELOR]),
            (Role.COUNSELOR, []),
        ],
    )
    def test_denied(self, role, allowed):
        with pytest.raises(AuthzError) as exc_info:
            authorize(role, allowed)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Access denied. Insufficient permissions."

    def test_role_codes_are_not_a_hierarchy(self):
        """Un code plus élevé n'implique aucun droit supplémentaire."""
        with pytest.raises(AuthzError):
            authorize(Role.RESEARCHER, [Role.PATIENT])


class TestRequireRoles:
    @pytest.mark.asyncio
    async def test_returns_user_when_allowed(self, patient_user):
        checker = require_roles(Role.PATIENT)

        assert await checker(current_user=patient_user) is patient_user

    @pytest.mark.asyncio
    async def test_multiple_roles(self, counselor_user):
        checker = require_roles(Role.PATIENT, Role.COUNSELOR)

        assert await checker(current_user=counselor_user) is counselor_user

    @pytest.mark.asyncio
    async def test_denies_other_roles(self, patient_user):
        checker = require_roles(Role.COUNSELOR)

        with pytest.raises(AuthzError):
            await checker(current_user=patient_user)


class TestCurrentUser:
    def test_role_helpers(self, patient_user, counselor_user):
        assert patient_user.is_patient and not patient_user.is_counselor
        assert counselor_user.is_counselor and not counselor_user.is_patient
