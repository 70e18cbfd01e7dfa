"""
Cryptographically secure random bytes from the host platform.

One implementation is chosen per platform family at startup through
default_entropy_source(); callers only see get_random_bytes().
"""

import os
import sys
import logging
from abc import ABC, abstractmethod

from .errors import EntropyUnavailable, InvalidLength

logger = logging.getLogger(__name__)


class EntropySource(ABC):
    """Source of cryptographically secure random bytes."""

    name = "abstract"

    def get_random_bytes(self, length: int) -> bytes:
        """
        Return exactly `length` random bytes.

        Args:
            length: Number of bytes, must be a positive integer

        Raises:
            InvalidLength: If length is not a positive integer
            EntropyUnavailable: If the native generator is missing or fails
        """
        if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
            raise InvalidLength(f"Random byte count must be a positive integer, got {length!r}")

        try:
            data = self._read(length)
        except (OSError, NotImplementedError, AttributeError) as exc:
            logger.warning("Entropy source %s failed: %s", self.name, type(exc).__name__)
            raise EntropyUnavailable(f"{self.name} entropy source failed") from exc

        if len(data) != length:
            logger.warning("Entropy source %s returned %d of %d bytes", self.name, len(data), length)
            raise EntropyUnavailable(f"{self.name} entropy source returned a short read")

        return data

    @abstractmethod
    def _read(self, length: int) -> bytes:
        """Perform the native call."""


class GetrandomEntropySource(EntropySource):
    """Linux getrandom(2) on the urandom pool; blocks only until the pool is initialised."""

    name = "getrandom"

    def _read(self, length: int) -> bytes:
        return os.getrandom(length)


class UrandomEntropySource(EntropySource):
    """os.urandom(), backed by the platform security framework where there is one."""

    name = "urandom"

    def _read(self, length: int) -> bytes:
        return os.urandom(length)


def default_entropy_source() -> EntropySource:
    """Select the entropy implementation for the running platform."""
    if sys.platform.startswith("linux") and hasattr(os, "getrandom"):
        return GetrandomEntropySource()
    return UrandomEntropySource()
