"""
Lifecycle of the per-installation device key.

The key is looked up in the settings store, generated from the entropy source
when absent, persisted as lowercase hex and cached for the process lifetime.
"""

import logging
import threading
from typing import Optional
from dataclasses import dataclass, field

from .entropy import EntropySource
from .errors import EntropyUnavailable, KeyProvisioningFailed, KeyStoreError
from .keystore import KeyStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceKey:
    """256-bit symmetric secret. Its value is kept out of repr()."""

    material: bytes = field(repr=False)

    def __post_init__(self):
        if len(self.material) != DeviceKeyManager.KEY_LEN:
            raise ValueError("Device key must be 32 bytes")

    def hex(self) -> str:
        return self.material.hex()


class DeviceKeyManager:
    """Loads or provisions the device key and keeps it in memory."""

    KEY_LEN = 32  # 256 bits for AES-256
    DEFAULT_KEY_ID = "device_encryption_key"

    def __init__(self, keystore: KeyStore, entropy: EntropySource, key_id: str = DEFAULT_KEY_ID):
        """
        Initialize the key manager.

        Args:
            keystore: Persistent settings store holding the hex-encoded key
            entropy: Random source used when no key exists yet
            key_id: Reserved settings entry for the key
        """
        self.keystore = keystore
        self.entropy = entropy
        self.key_id = key_id

        self._key: Optional[DeviceKey] = None
        self._provision_lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        """Check if the key has been loaded or provisioned in this process."""
        return self._key is not None

    def get_key(self) -> DeviceKey:
        """
        Return the device key, provisioning it on first use.

        Raises:
            KeyProvisioningFailed: If the key could not be read, generated or stored.
                The failure is not cached; the next call starts over.
        """
        key = self._key
        if key is not None:
            return key

        with self._provision_lock:
            # Another caller may have finished while we waited
            if self._key is None:
                self._key = self._load_or_create()
            return self._key

    def _load_or_create(self) -> DeviceKey:
        try:
            stored = self.keystore.get_string(self.key_id)
        except KeyStoreError as exc:
            logger.warning("Could not read device key entry: %s", type(exc).__name__)
            raise KeyProvisioningFailed("Device key could not be read") from exc

        if stored:
            try:
                key = DeviceKey(bytes.fromhex(stored))
            except ValueError as exc:
                logger.warning("Stored device key entry is malformed")
                raise KeyProvisioningFailed("Stored device key is malformed") from exc
            logger.info("Loaded existing device key")
            return key

        try:
            key = DeviceKey(self.entropy.get_random_bytes(self.KEY_LEN))
        except EntropyUnavailable as exc:
            logger.warning("Device key generation failed: %s", type(exc).__name__)
            raise KeyProvisioningFailed("Device key could not be generated") from exc

        try:
            self.keystore.set_string(self.key_id, key.hex())
        except KeyStoreError as exc:
            logger.warning("Could not persist device key: %s", type(exc).__name__)
            raise KeyProvisioningFailed("Device key could not be stored") from exc

        logger.info("Provisioned new device key")
        return key
