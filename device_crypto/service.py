"""
Encryption of JSON-serializable values under the device key.

Uses AES-256-GCM. A blob is base64(nonce || ciphertext || tag) as one string.
"""

import json
import hmac
import base64
import binascii
import hashlib
import logging
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .device_key import DeviceKeyManager
from .entropy import EntropySource
from .errors import DecryptionFailed

logger = logging.getLogger(__name__)


class CryptoService:
    """Encrypts local data, hashes passwords and issues random tokens."""

    NONCE_LEN = 12  # 96 bits for AES-GCM
    TAG_LEN = 16
    TOKEN_LEN = 32

    def __init__(self, key_manager: DeviceKeyManager, entropy: EntropySource):
        self.key_manager = key_manager
        self.entropy = entropy

    @classmethod
    def _check_keys(cls, value: Any, seen: set[int]) -> None:
        # json.dumps would coerce non-string keys and break the round trip
        if not isinstance(value, (dict, list, tuple)):
            return
        if id(value) in seen:
            raise TypeError("Value contains a circular reference")
        seen.add(id(value))

        if isinstance(value, dict):
            for key, item in value.items():
                if not isinstance(key, str):
                    raise TypeError(f"Object keys must be str, not {type(key).__name__}")
                cls._check_keys(item, seen)
        else:
            for item in value:
                cls._check_keys(item, seen)
        seen.discard(id(value))

    @classmethod
    def _serialize(cls, value: Any) -> bytes:
        cls._check_keys(value, set())
        try:
            text = json.dumps(value, ensure_ascii=False, sort_keys=True, separators=(",", ":"), allow_nan=False)
        except ValueError as exc:
            raise TypeError("Value contains NaN or Infinity, which JSON cannot represent") from exc
        return text.encode("utf-8")

    def encrypt_data(self, value: Any) -> str:
        """
        Encrypt a JSON-serializable value.

        Args:
            value: Any value json.dumps accepts

        Returns:
            Opaque ASCII blob

        Raises:
            TypeError: If value is not JSON-serializable, has non-str object keys,
                or contains NaN/Infinity
            KeyProvisioningFailed: If the device key is unavailable
            EntropyUnavailable: If no nonce could be drawn
        """
        plaintext = self._serialize(value)
        key = self.key_manager.get_key()

        nonce = self.entropy.get_random_bytes(self.NONCE_LEN)
        ciphertext = AESGCM(key.material).encrypt(nonce, plaintext, None)

        return base64.b64encode(nonce + ciphertext).decode("ascii")

    def decrypt_data(self, blob: str) -> Any:
        """
        Decrypt a blob produced by encrypt_data.

        Raises:
            DecryptionFailed: If the blob is malformed, was encrypted under another
                key, was modified, or does not hold valid JSON
            KeyProvisioningFailed: If the device key is unavailable
        """
        if not isinstance(blob, str):
            raise DecryptionFailed("Encrypted blob must be a string")

        try:
            raw = base64.b64decode(blob.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise DecryptionFailed("Encrypted blob is not valid base64") from exc

        if len(raw) < self.NONCE_LEN + self.TAG_LEN:
            raise DecryptionFailed("Encrypted blob is too short")

        key = self.key_manager.get_key()
        nonce, ciphertext = raw[:self.NONCE_LEN], raw[self.NONCE_LEN:]

        try:
            plaintext = AESGCM(key.material).decrypt(nonce, ciphertext, None)
        except InvalidTag as exc:
            logger.warning("Rejected encrypted blob: authentication failed")
            raise DecryptionFailed("Encrypted blob failed authentication") from exc

        try:
            return json.loads(plaintext.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise DecryptionFailed("Decrypted data is not valid JSON") from exc

    @staticmethod
    def hash_password(password: str) -> str:
        """Unsalted SHA-256 of the password, hex-encoded."""
        return hashlib.sha256(password.encode("utf-8")).hexdigest()

    def verify_password(self, password: str, digest: str) -> bool:
        """Compare a password against a stored digest in constant time."""
        return hmac.compare_digest(self.hash_password(password), digest)

    def generate_secure_token(self) -> str:
        """64 hex characters from 32 fresh random bytes. Independent of the device key."""
        return self.entropy.get_random_bytes(self.TOKEN_LEN).hex()
