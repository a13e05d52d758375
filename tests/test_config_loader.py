import pytest
from pydantic import ValidationError

from amanice.utils.config_loader import DEFAULT_CONFIG_PATH, load_store_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("AMANICE_CONFIG", "REMOTE_STORE_URL", "REMOTE_STORE_API_KEY", "DATABASE_URL", "REDIS_URL", "WHATSAPP_NUMBER", "CATALOG_URL"):
        monkeypatch.delenv(name, raising=False)


def test_repository_config_loads():
    cfg = load_store_config(DEFAULT_CONFIG_PATH)

    assert cfg.catalog.path == "data/products.json"
    assert cfg.remote.timeout_seconds == 20
    assert cfg.cart.whatsapp_number == "27731635803"
    assert cfg.uploads.max_bytes == 10 * 1024 * 1024
    assert cfg.watcher.interval_seconds == 2


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_store_config(tmp_path / "nope.yml")
    assert cfg.storage.backend == "memory"
    assert cfg.projector.prefix_fallback is True


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("REMOTE_STORE_URL", "https://shop.example")
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379/1")
    monkeypatch.setenv("WHATSAPP_NUMBER", "27110000000")

    cfg = load_store_config(tmp_path / "nope.yml")

    assert cfg.remote.base_url == "https://shop.example"
    assert cfg.storage.backend == "redis"
    assert cfg.storage.redis_url == "redis://cache:6379/1"
    assert cfg.cart.whatsapp_number == "27110000000"


def test_amanice_config_env_selects_file(tmp_path, monkeypatch):
    path = tmp_path / "store.yml"
    path.write_text("projector:\n  index_fallback: false\n", encoding="utf-8")
    monkeypatch.setenv("AMANICE_CONFIG", str(path))

    assert load_store_config().projector.index_fallback is False


def test_invalid_config_raises(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("storage:\n  backend: floppy\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_store_config(path)
