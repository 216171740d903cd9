"""Domain exceptions raised by the service layer.

Routers never see SQLAlchemy errors for these cases; the global error
handlers in ``myscience.middleware.error_handler`` map them to HTTP codes.
"""

from __future__ import annotations


class UserNotFoundError(LookupError):
    """Referenced user does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class UnknownActionError(ValueError):
    """Action type is not present in the action definition map."""

    def __init__(self, action_type: object) -> None:
        super().__init__(f"Unknown gamification action: {action_type!r}")
        self.action_type = action_type


class XPUpdateConflictError(RuntimeError):
    """XP compare-and-swap kept losing to concurrent writers."""

    def __init__(self, user_id: str, attempts: int) -> None:
        super().__init__(f"XP update for user {user_id} conflicted {attempts} times")
        self.user_id = user_id
        self.attempts = attempts
