"""
Configuration for the device-bound local data protection layer.
"""

import os
import logging
from pathlib import Path
from dataclasses import dataclass, field

VERSION = "1.0.0"


@dataclass
class Config:
    """Application configuration."""

    # Storage paths (the settings store lives here)
    STORAGE_DIR: Path = field(
        default_factory=lambda: Path(os.getenv("DEVICE_CRYPTO_STORAGE_DIR", Path(__file__).parent / "data"))
    )

    # Cryptographic settings
    DEVICE_KEY_ID: str = field(default_factory=lambda: os.getenv("DEVICE_KEY_ID", "device_encryption_key"))
    USERS_KEY_ID: str = "registered_users"

    # Credential rules
    MIN_PASSWORD_LENGTH: int = field(
        default_factory=lambda: int(os.getenv("DEVICE_CRYPTO_MIN_PASSWORD_LENGTH", "6"))
    )
    ALLOWED_ROLES: tuple[str, ...] = ("pharmacist", "courier", "admin")

    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("DEVICE_CRYPTO_LOG_LEVEL", "INFO"))

    def __post_init__(self):
        """Ensure storage directory exists."""
        self.STORAGE_DIR = Path(self.STORAGE_DIR)
        self.STORAGE_DIR.mkdir(parents=True, exist_ok=True)

    @property
    def keystore_path(self) -> Path:
        """Path to the persistent settings store."""
        return self.STORAGE_DIR / "settings.json"

    @property
    def logs_dir(self) -> Path:
        """Directory for log files."""
        path = self.STORAGE_DIR / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path


def setup_logging(cfg: "Config | None" = None) -> None:
    """Attach console and file handlers to the root logger. Repeated calls are no-ops."""
    cfg = cfg or config
    root = logging.getLogger()
    if any(getattr(handler, "_device_crypto", False) for handler in root.handlers):
        return

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    console = logging.StreamHandler()
    console.setFormatter(formatter)

    file_handler = logging.FileHandler(cfg.logs_dir / "device_crypto.log", encoding="utf-8")
    file_handler.setFormatter(formatter)

    for handler in (console, file_handler):
        handler._device_crypto = True

    root.setLevel(cfg.LOG_LEVEL.upper())
    root.addHandler(console)
    root.addHandler(file_handler)


# Global config instance
config = Config()
