import pytest

from device_crypto import CryptoService, DeviceKeyManager, MemoryKeyStore, UserCache
from device_crypto.entropy import EntropySource, UrandomEntropySource


class FailingEntropySource(EntropySource):
    """Native bridge that always reports failure."""

    name = "failing"

    def __init__(self):
        self.calls = 0

    def _read(self, length):
        self.calls += 1
        raise OSError("native call failed")


class CountingEntropySource(UrandomEntropySource):
    def __init__(self):
        self.requests = []

    def _read(self, length):
        self.requests.append(length)
        return super()._read(length)


@pytest.fixture()
def keystore():
    return MemoryKeyStore()


@pytest.fixture()
def entropy():
    return CountingEntropySource()


@pytest.fixture()
def key_manager(keystore, entropy):
    return DeviceKeyManager(keystore, entropy)


@pytest.fixture()
def crypto(key_manager, entropy):
    return CryptoService(key_manager, entropy)


@pytest.fixture()
def user_cache(keystore, crypto):
    return UserCache(keystore, crypto)
