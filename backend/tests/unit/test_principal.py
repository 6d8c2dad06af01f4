"""Tests for bearer parsing and principal resolution."""
import uuid
from datetime import timedelta

import pytest

from app.exceptions import ForbiddenError, InactiveAccountError, UnauthenticatedError
from app.models.user import UserRole
from app.services.credentials import create_access_token
from app.services.principal import extract_bearer_token, resolve_principal

SECRET = "test-secret-key"


class TestBearerParsing:
    def test_extracts_token(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        assert extract_bearer_token("bearer abc") == "abc"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer ", "Basic abc", "Token abc", "Bearer a b"])
    def test_rejects_missing_or_malformed(self, header):
        with pytest.raises(UnauthenticatedError):
            extract_bearer_token(header)


class TestResolvePrincipal:
    def test_resolves_from_database_row(self, db_session, member):
        token = create_access_token({"sub": str(member.id), "role": "super_admin"}, SECRET)
        principal = resolve_principal(db_session, token, SECRET)

        assert principal.id == member.id
        assert principal.tenant_id == member.tenant_id
        # role comes from the row, not from the claims
        assert principal.role == UserRole.USER

    def test_bad_signature(self, db_session, member):
        token = create_access_token({"sub": str(member.id)}, "another-secret")
        with pytest.raises(UnauthenticatedError):
            resolve_principal(db_session, token, SECRET)

    def test_expired_token(self, db_session, member):
        token = create_access_token({"sub": str(member.id)}, SECRET, expires_delta=timedelta(seconds=-10))
        with pytest.raises(UnauthenticatedError):
            resolve_principal(db_session, token, SECRET)

    def test_garbage_subject(self, db_session):
        token = create_access_token({"sub": "not-a-uuid"}, SECRET)
        with pytest.raises(UnauthenticatedError):
            resolve_principal(db_session, token, SECRET)

    def test_deleted_user(self, db_session):
        token = create_access_token({"sub": str(uuid.uuid4())}, SECRET)
        with pytest.raises(UnauthenticatedError):
            resolve_principal(db_session, token, SECRET)

    def test_inactive_user_is_forbidden(self, db_session, make_user, sample_tenant):
        user = make_user(sample_tenant, email="gone@acme.com", is_active=False)
        token = create_access_token({"sub": str(user.id)}, SECRET)
        with pytest.raises(InactiveAccountError) as exc_info:
            resolve_principal(db_session, token, SECRET)
        assert isinstance(exc_info.value, ForbiddenError)
        assert exc_info.value.status_code == 403
