"""
Local account handling.

Manages:
- Registration into the encrypted user cache
- Login against stored password digests
- Session management
"""

import logging
from typing import Any, Mapping, Optional
from datetime import datetime
from dataclasses import dataclass, field

from credentials import CredentialValidator, RegistrationValidation
from device_crypto import CryptoService, SecureDataError, UserCache

logger = logging.getLogger(__name__)


@dataclass
class UserSession:
    """Represents a logged-in user on this device."""
    user_id: str
    email: str
    role: str
    token: str
    name: str = ""
    created_at: datetime = field(default_factory=datetime.now)


class AccountManager:
    """Registers and authenticates users stored on the device."""

    ID_LEN = 16

    def __init__(self, crypto: CryptoService, users: UserCache, validator: Optional[CredentialValidator] = None):
        """
        Initialize the account manager.

        Args:
            crypto: Service used for password digests and session tokens
            users: Encrypted user record cache
            validator: Credential format rules
        """
        self.crypto = crypto
        self.users = users
        self.validator = validator or CredentialValidator()
        self._session: Optional[UserSession] = None

    @property
    def is_authenticated(self) -> bool:
        """Check if a user is currently logged in."""
        return self._session is not None

    @property
    def current_session(self) -> Optional[UserSession]:
        """Get the current session."""
        return self._session

    def register(self, data: Mapping[str, Any]) -> RegistrationValidation:
        """
        Register a new local user.

        Args:
            data: email, password, role and optional name / phone_number

        Returns:
            RegistrationValidation; invalid when a rule fails or the email is taken

        Raises:
            SecureDataError: If the user cache could not be read or written
        """
        result = self.validator.validate_registration_data(data)
        if not result.valid:
            return result

        users = self.users.load_users()
        if any(user.get("email") == data["email"] for user in users):
            return RegistrationValidation(False, ["Email is already registered"])

        users.append({
            "id": self.crypto.generate_secure_token()[:self.ID_LEN],
            "email": data["email"],
            "role": data["role"],
            "name": data.get("name", ""),
            "phone_number": data.get("phone_number", ""),
            "password_hash": self.crypto.hash_password(data["password"]),
        })
        self.users.save_users(users)

        logger.info("Registered %s user %s", data["role"], data["email"])
        return result

    def login(self, email: str, password: str) -> tuple[bool, str]:
        """
        Log in with email and password.

        Returns:
            Tuple of (success, message)

        Raises:
            SecureDataError: If the user cache could not be decrypted
        """
        check = self.validator.validate_credentials_format(email, password)
        if not check.valid:
            return False, check.error

        try:
            user = self.users.find_by_email(email)
        except SecureDataError as exc:
            logger.warning("Login for %s blocked: %s", email, type(exc).__name__)
            raise

        if not self.validator.validate_user_credentials(user, email):
            return False, "Invalid email or password"
        if not self.crypto.verify_password(password, user.get("password_hash", "")):
            logger.info("Rejected password for %s", email)
            return False, "Invalid email or password"

        self._session = UserSession(
            user_id=user["id"],
            email=user["email"],
            role=user["role"],
            token=self.crypto.generate_secure_token(),
            name=user.get("name", ""),
        )
        logger.info("Logged in %s", email)
        return True, "Login successful"

    def logout(self) -> None:
        """Logout and clear session."""
        self._session = None
