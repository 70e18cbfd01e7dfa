"""
Encrypted local cache of registered user records.

The whole list is one encrypted entry in the settings store.
"""

import logging
from typing import Any, Optional

from .errors import DecryptionFailed
from .keystore import KeyStore
from .service import CryptoService

logger = logging.getLogger(__name__)


class UserCache:
    """Stores user records encrypted under the device key."""

    DEFAULT_ENTRY = "registered_users"

    def __init__(self, keystore: KeyStore, crypto: CryptoService, entry: str = DEFAULT_ENTRY):
        """
        Initialize the user cache.

        Args:
            keystore: Settings store holding the encrypted list
            crypto: Service used to encrypt and decrypt the list
            entry: Settings entry name
        """
        self.keystore = keystore
        self.crypto = crypto
        self.entry = entry

    def save_users(self, users: list[dict[str, Any]]) -> None:
        """Encrypt and store the full list of users."""
        blob = self.crypto.encrypt_data(list(users))
        self.keystore.set_string(self.entry, blob)
        logger.info("Saved %d user record(s)", len(users))

    def load_users(self) -> list[dict[str, Any]]:
        """
        Load the stored users.

        Returns:
            The decrypted list, or an empty list when nothing was saved

        Raises:
            DecryptionFailed: If an entry exists but cannot be decrypted
        """
        blob = self.keystore.get_string(self.entry)
        if not blob:
            return []

        users = self.crypto.decrypt_data(blob)
        if not isinstance(users, list):
            raise DecryptionFailed("Cached users entry does not hold a list")
        return users

    def find_by_email(self, email: str) -> Optional[dict[str, Any]]:
        """Return the user registered under an email, if any."""
        for user in self.load_users():
            if isinstance(user, dict) and user.get("email") == email:
                return user
        return None

    def clear_users(self) -> None:
        """Remove the cached users."""
        self.keystore.remove(self.entry)
