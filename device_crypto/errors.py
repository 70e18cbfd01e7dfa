"""
Exceptions raised by the local data protection layer.

Messages never carry key material, plaintext or password digests.
"""


class SecureDataError(Exception):
    """Base class for failures that block access to secured local data."""

    user_message = "Could not access secured data"


class EntropyUnavailable(SecureDataError):
    """The platform random generator is missing or reported a failure."""


class InvalidLength(SecureDataError, ValueError):
    """A non-positive byte count was requested."""


class KeyStoreError(SecureDataError):
    """The persistent settings store could not be read or written."""


class KeyProvisioningFailed(SecureDataError):
    """The device key could not be loaded or created."""


class DecryptionFailed(SecureDataError):
    """A blob could not be decrypted into valid data."""
