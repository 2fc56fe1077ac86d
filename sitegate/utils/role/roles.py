from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Dict

from flask_login import UserMixin, current_user

from sitegate.app.extensions import login_manager

ADMIN_ROLE = "admin"


class AdminIdentity(UserMixin):
    """Identidade derivada de um token JWT válido."""

    def __init__(self, claims: Dict[str, Any]):
        self.claims = claims
        self.username = claims.get("username")
        self.role = claims.get("role")

    def get_id(self):
        return self.username

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def admin_required(fn: Callable) -> Callable:
    """Rejeita com 401 quando não há token válido com role=admin."""

    @wraps(fn)
    def decorator_view(*args: Any, **kwargs: Any):
        if not current_user.is_authenticated or not getattr(current_user, "is_admin", False):
            return login_manager.unauthorized()
        return fn(*args, **kwargs)

    return decorator_view
