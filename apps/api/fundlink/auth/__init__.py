"""Auth package: bearer-token dependencies."""

from fundlink.auth.dependencies import get_current_user, require_role

__all__ = [
    "get_current_user",
    "require_role",
]
