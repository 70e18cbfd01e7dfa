"""
Credential format validation for registration and login.

Checks shape only. Nothing here touches storage or cryptography.
"""

from typing import Any, Mapping, Optional
from dataclasses import dataclass, field

from config import config


@dataclass
class ValidationResult:
    """Outcome of a single-error format check."""
    valid: bool
    error: Optional[str] = None


@dataclass
class RegistrationValidation:
    """Outcome of a registration check, listing every violated rule."""
    valid: bool
    errors: list[str] = field(default_factory=list)


class CredentialValidator:
    """Validates email, password and role formats."""

    def __init__(self, min_password_length: Optional[int] = None, allowed_roles: Optional[tuple[str, ...]] = None):
        """
        Initialize the validator.

        Args:
            min_password_length: Shortest accepted password (defaults to config)
            allowed_roles: Accepted role names (defaults to config)
        """
        self.min_password_length = (
            min_password_length if min_password_length is not None else config.MIN_PASSWORD_LENGTH
        )
        self.allowed_roles = tuple(allowed_roles) if allowed_roles is not None else config.ALLOWED_ROLES

    @staticmethod
    def _email_ok(email: Any) -> bool:
        return isinstance(email, str) and "@" in email

    def _password_ok(self, password: Any) -> bool:
        return isinstance(password, str) and len(password) >= self.min_password_length

    def validate_credentials_format(self, email: Any, password: Any) -> ValidationResult:
        """Check the email shape and password length used at login."""
        if not self._email_ok(email):
            return ValidationResult(False, "Invalid email address")
        if not self._password_ok(password):
            return ValidationResult(
                False, f"Password must be at least {self.min_password_length} characters"
            )
        return ValidationResult(True)

    def validate_registration_data(self, data: Optional[Mapping[str, Any]]) -> RegistrationValidation:
        """
        Check registration fields, collecting all problems at once.

        Args:
            data: Mapping with email, password and role

        Returns:
            RegistrationValidation with one message per violated rule
        """
        data = data if isinstance(data, Mapping) else {}
        errors = []

        if not self._email_ok(data.get("email")):
            errors.append("Invalid email address")
        if not self._password_ok(data.get("password")):
            errors.append(f"Password must be at least {self.min_password_length} characters")
        if data.get("role") not in self.allowed_roles:
            errors.append(f"Role must be one of: {', '.join(self.allowed_roles)}")

        return RegistrationValidation(valid=not errors, errors=errors)

    @staticmethod
    def validate_user_credentials(user: Any, email: str) -> bool:
        """True if a user exists and is registered under `email`. Passwords are not compared here."""
        if user is None:
            return False
        if isinstance(user, Mapping):
            return user.get("email") == email
        return getattr(user, "email", None) == email
