from __future__ import annotations


class BoardLimitReachedError(Exception):
    """Raised when a user already owns the maximum number of boards."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Maximum number of boards ({limit}) reached for this user")


class AccountExistsError(ValueError):
    """Raised on sign up when the email is already registered."""


class InvalidCredentialsError(ValueError):
    """Raised on sign in when the email/password pair is rejected."""


class BoardAccessDeniedError(Exception):
    """Raised when a board does not exist or belongs to another user."""

    def __init__(self, message: str = "Board not found or access denied") -> None:
        super().__init__(message)
