"""
Device-bound local data protection.

Handles:
- Secure random bytes (platform entropy)
- Device key provisioning and persistence
- Data encryption (AES-256-GCM)
- Password hashing and secure tokens
"""

from .entropy import EntropySource, default_entropy_source
from .keystore import FileKeyStore, KeyStore, MemoryKeyStore
from .device_key import DeviceKey, DeviceKeyManager
from .service import CryptoService
from .user_cache import UserCache
from .errors import (
    DecryptionFailed,
    EntropyUnavailable,
    InvalidLength,
    KeyProvisioningFailed,
    KeyStoreError,
    SecureDataError,
)


def create_crypto_service(cfg, keystore=None, entropy=None) -> CryptoService:
    """
    Wire a CryptoService for the given configuration.

    Args:
        cfg: Application Config
        keystore: Settings store; defaults to the file store in cfg.STORAGE_DIR
        entropy: Random source; defaults to the platform implementation
    """
    keystore = keystore if keystore is not None else FileKeyStore(cfg.keystore_path)
    entropy = entropy if entropy is not None else default_entropy_source()
    key_manager = DeviceKeyManager(keystore, entropy, key_id=cfg.DEVICE_KEY_ID)
    return CryptoService(key_manager, entropy)


def create_user_cache(cfg, crypto: CryptoService) -> UserCache:
    """
    Wire a UserCache on the same settings store as `crypto`.

    Args:
        cfg: Application Config (supplies the entry name)
        crypto: Service returned by create_crypto_service
    """
    return UserCache(crypto.key_manager.keystore, crypto, entry=cfg.USERS_KEY_ID)


__all__ = [
    "CryptoService",
    "DecryptionFailed",
    "DeviceKey",
    "DeviceKeyManager",
    "EntropySource",
    "EntropyUnavailable",
    "FileKeyStore",
    "InvalidLength",
    "KeyProvisioningFailed",
    "KeyStore",
    "KeyStoreError",
    "MemoryKeyStore",
    "SecureDataError",
    "UserCache",
    "create_crypto_service",
    "create_user_cache",
]
