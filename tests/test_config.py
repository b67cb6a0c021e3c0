"""Tests for environment-driven settings."""

import pytest
from pathlib import Path

from pydantic import ValidationError

from moodspend.config import AppSettings, StorageSettings, get_settings
from moodspend.models.expense import AmountFallback
from moodspend.services.storage import InMemoryExpenseStorage, JsonFileExpenseStorage
from moodspend.tracker import create_storage


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run each test away from any local .env file."""
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self):
        settings = AppSettings()
        assert settings.currency_symbol == "₹"
        assert settings.amount_fallback == AmountFallback.REJECT
        assert settings.recover_corrupt_data is True
        assert settings.min_records_for_insights == 3
        assert settings.max_import_size_bytes == 5 * 1024 * 1024

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MOODSPEND_CURRENCY_SYMBOL", "$")
        monkeypatch.setenv("MOODSPEND_AMOUNT_FALLBACK", "zero")
        monkeypatch.setenv("MOODSPEND_LOG_LEVEL", "debug")
        settings = AppSettings()
        assert settings.currency_symbol == "$"
        assert settings.amount_fallback == AmountFallback.ZERO
        assert settings.log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            AppSettings(log_level="loud")


class TestStorageSettings:
    """Tests for StorageSettings and backend selection."""

    def test_slot_path(self):
        settings = StorageSettings(data_dir=Path("/tmp/x"), storage_key="slot")
        assert settings.slot_path == Path("/tmp/x/slot.json")

    def test_invalid_backend(self):
        with pytest.raises(ValidationError):
            StorageSettings(backend="sheets")

    def test_file_backend(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MOODSPEND_STORAGE_DATA_DIR", str(tmp_path))
        storage = create_storage(get_settings())
        assert isinstance(storage, JsonFileExpenseStorage)
        assert storage.path == tmp_path / "emotional_expenses_v1.json"

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setenv("MOODSPEND_STORAGE_BACKEND", "memory")
        storage = create_storage(get_settings())
        assert isinstance(storage, InMemoryExpenseStorage)
