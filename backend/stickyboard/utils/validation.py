from __future__ import annotations

MIN_PASSWORD_LENGTH = 6

WEAK_PASSWORDS = {"password", "123456", "qwerty", "admin", "test", "password123", "password1"}


def validate_password_strength(password: str) -> tuple[bool, str | None]:
    """Validate password strength."""
    if len(password) < MIN_PASSWORD_LENGTH:
        return False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if not any(c.isupper() for c in password):
        return False, "Password must contain at least one uppercase letter"
    if not any(c.isdigit() for c in password):
        return False, "Password must contain at least one digit"

    if password.lower() in WEAK_PASSWORDS:
        return False, "Password is too weak. Please choose a stronger password."
    return True, None
