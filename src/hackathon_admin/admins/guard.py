from __future__ import annotations

from functools import wraps

from flask import g

from ..common.http import bearer_token
from .service import AuthService


def make_admin_required(auth: AuthService):
    """Decorator factory gating a view behind a valid admin bearer token."""

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.admin = auth.verify_token(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    return admin_required
