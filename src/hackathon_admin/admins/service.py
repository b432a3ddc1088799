from __future__ import annotations

import logging
from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import DEFAULT_ADMIN_TOKEN_MAX_AGE
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, ValidationError
from .model import Admin, LoginResult
from .repository import AdminRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Admin credential check and bearer-token issuance."""

    def __init__(
        self,
        admins: AdminRepository,
        *,
        secret_key: str,
        token_max_age: int = DEFAULT_ADMIN_TOKEN_MAX_AGE,
    ):
        self._admins = admins
        self._serializer = URLSafeTimedSerializer(secret_key, salt="admin-token")
        self._token_max_age = int(token_max_age)

    def issue_token(self, admin: Admin) -> str:
        return self._serializer.dumps({"id": admin.admin_id, "username": admin.username})

    def verify_token(self, token: str | None) -> dict[str, Any]:
        if not token:
            raise AuthenticationError("Access token required")
        try:
            return self._serializer.loads(token, max_age=self._token_max_age)
        except SignatureExpired:
            raise AuthorizationError("Token expired")
        except BadSignature:
            raise AuthorizationError("Invalid token")

    def login(self, username: Any, password: Any) -> LoginResult:
        if not username or not password:
            raise ValidationError("Username and password are required")

        admin = self._admins.get_by_username(str(username).strip())
        try:
            ok = bool(admin) and check_password_hash(admin.password_hash, str(password))
        except ValueError:
            # Unknown hash format stored for this account.
            ok = False
        if not ok:
            logger.warning("Failed admin login for %r", username)
            raise AuthenticationError("Invalid credentials")

        return LoginResult(token=self.issue_token(admin), admin=admin)

    def create_admin(self, username: Any, password: Any) -> Admin:
        if not username or not password:
            raise ValidationError("Username and password are required")
        username = require_non_empty(username, "username")
        require_min_length(str(password), "password", 6)

        try:
            admin = self._admins.create(username=username, password_hash=generate_password_hash(str(password)))
        except ConflictError:
            raise ConflictError("Admin with this username already exists")
        logger.info("Created admin %r", username)
        return admin

    def has_admins(self) -> bool:
        return self._admins.count() > 0
