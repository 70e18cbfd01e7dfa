import logging

from config import Config, setup_logging


def test_defaults(tmp_path):
    cfg = Config(STORAGE_DIR=tmp_path / "store")
    assert cfg.STORAGE_DIR.is_dir()
    assert cfg.keystore_path == tmp_path / "store" / "settings.json"
    assert cfg.DEVICE_KEY_ID == "device_encryption_key"
    assert cfg.ALLOWED_ROLES == ("pharmacist", "courier", "admin")


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("DEVICE_CRYPTO_STORAGE_DIR", str(tmp_path / "env"))
    monkeypatch.setenv("DEVICE_KEY_ID", "custom_key")
    monkeypatch.setenv("DEVICE_CRYPTO_MIN_PASSWORD_LENGTH", "8")

    cfg = Config()
    assert cfg.STORAGE_DIR == tmp_path / "env"
    assert cfg.DEVICE_KEY_ID == "custom_key"
    assert cfg.MIN_PASSWORD_LENGTH == 8


def test_setup_logging_writes_log_file(tmp_path):
    cfg = Config(STORAGE_DIR=tmp_path)
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging(cfg)
        logging.getLogger("device_crypto.test").warning("hello")
        for handler in root.handlers:
            handler.flush()
        assert "hello" in (cfg.logs_dir / "device_crypto.log").read_text()
    finally:
        root.setLevel(level)
        for handler in root.handlers[:]:
            if handler not in before:
                root.removeHandler(handler)
                handler.close()


def test_setup_logging_twice_adds_handlers_once(tmp_path):
    cfg = Config(STORAGE_DIR=tmp_path)
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging(cfg)
        setup_logging(cfg)
        added = [handler for handler in root.handlers if handler not in before]
        assert len(added) == 2
    finally:
        root.setLevel(level)
        for handler in root.handlers[:]:
            if handler not in before:
                root.removeHandler(handler)
                handler.close()
