"""Tests for the environment-driven Settings."""

import pytest
from pydantic import ValidationError

from src.infrastructure.config import Settings

_VARS = (
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "STOCK_PRICES_TABLE",
    "STOCK_SUMMARIES_TABLE",
    "STORE_PAGE_SIZE",
    "STORE_TIMEOUT_SECONDS",
    "REQUEST_TIMEOUT_SECONDS",
    "CORS_ORIGINS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the picture.
    monkeypatch.chdir(tmp_path)


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.STOCK_PRICES_TABLE == "stock_prices"
        assert settings.STOCK_SUMMARIES_TABLE == "stock_summaries"
        assert settings.STORE_PAGE_SIZE == 1000
        assert settings.REQUEST_TIMEOUT_SECONDS == 30.0
        assert settings.CORS_ORIGINS == ["http://localhost:3000"]
        assert settings.LOG_LEVEL == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://x.supabase.co/")
        monkeypatch.setenv("SUPABASE_KEY", " key ")
        monkeypatch.setenv("STORE_PAGE_SIZE", "500")
        monkeypatch.setenv("STORE_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.SUPABASE_URL == "https://x.supabase.co"
        assert settings.SUPABASE_KEY == "key"
        assert settings.STORE_PAGE_SIZE == 500
        assert settings.STORE_TIMEOUT_SECONDS == 2.5
        assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]
        assert settings.LOG_LEVEL == "DEBUG"
        settings.require_store_credentials()

    def test_reads_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("SUPABASE_URL=https://dotenv.supabase.co\n")

        assert Settings().SUPABASE_URL == "https://dotenv.supabase.co"

    @pytest.mark.parametrize("value", ["abc", "0", "-5"])
    def test_rejects_bad_page_size(self, monkeypatch, value):
        monkeypatch.setenv("STORE_PAGE_SIZE", value)
        with pytest.raises(ValidationError):
            Settings()

    def test_rejects_non_positive_timeout(self, monkeypatch):
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://x.supabase.co")
        with pytest.raises(RuntimeError, match="SUPABASE_KEY"):
            Settings().require_store_credentials()
