from __future__ import annotations

import pytest

from hackathon_admin.admins.service import AuthService
from hackathon_admin.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)


def test_login_issues_verifiable_token(auth_service):
    admin = auth_service.create_admin("root", "secret123")

    result = auth_service.login("root", "secret123")

    claims = auth_service.verify_token(result.token)
    assert claims == {"id": admin.admin_id, "username": "root"}
    assert "password_hash" not in result.to_dict()["admin"]


def test_password_is_hashed(auth_service, admins_repo):
    auth_service.create_admin("root", "secret123")

    assert admins_repo.get_by_username("root").password_hash != "secret123"


def test_wrong_credentials(auth_service):
    auth_service.create_admin("root", "secret123")

    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        auth_service.login("root", "nope-nope")

    with pytest.raises(AuthenticationError):
        auth_service.login("ghost", "secret123")

    with pytest.raises(ValidationError):
        auth_service.login("root", "")


def test_missing_and_bad_tokens(auth_service):
    with pytest.raises(AuthenticationError):
        auth_service.verify_token(None)

    with pytest.raises(AuthorizationError, match="Invalid token"):
        auth_service.verify_token("not-a-token")


def test_token_from_another_secret_is_rejected(admins_repo, auth_service):
    admin = auth_service.create_admin("root", "secret123")
    other = AuthService(admins_repo, secret_key="another-secret")

    with pytest.raises(AuthorizationError):
        auth_service.verify_token(other.issue_token(admin))


def test_expired_token(admins_repo):
    auth = AuthService(admins_repo, secret_key="test-secret", token_max_age=-1)
    admin = auth.create_admin("root", "secret123")

    with pytest.raises(AuthorizationError, match="expired"):
        auth.verify_token(auth.issue_token(admin))


def test_create_admin_rules(auth_service):
    with pytest.raises(ValidationError, match="at least 6"):
        auth_service.create_admin("root", "123")

    auth_service.create_admin("root", "secret123")
    assert auth_service.has_admins()

    with pytest.raises(ConflictError):
        auth_service.create_admin("root", "secret456")
