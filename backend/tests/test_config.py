import pytest

from backoffice.core.config import Settings, _strip_asyncpg_unsupported_params
from backoffice.db.session import engine_options

URLS = dict(
    DATABASE_URL_ASYNC="postgresql+asyncpg://u:p@db:5432/backoffice?sslmode=require&application_name=api",
    DATABASE_URL_SYNC="postgresql://u:p@db:5432/backoffice",
)


def test_defaults():
    s = Settings(**URLS)

    assert s.PAYER_RECEIPT_BUCKET == "Payment Receipt"
    assert s.ACK_RECEIPT_BUCKET == "ar-receipt"
    assert s.PAYMENT_PAGE_SIZE == 50
    assert "pdf" in s.ALLOWED_RECEIPT_EXTENSIONS


def test_clean_async_url_drops_asyncpg_unsupported_params():
    s = Settings(**URLS)

    assert "sslmode" not in s.DATABASE_URL_ASYNC_CLEAN
    assert "application_name=api" in s.DATABASE_URL_ASYNC_CLEAN
    assert _strip_asyncpg_unsupported_params("sqlite+aiosqlite:///./dev.db") == "sqlite+aiosqlite:///./dev.db"


@pytest.mark.parametrize(
    "overrides",
    [
        {"PAYER_RECEIPT_BUCKET": "receipts", "ACK_RECEIPT_BUCKET": "receipts"},
        {"PAYMENT_PAGE_SIZE": 0},
        {"MAX_RECEIPT_BYTES": 0},
        {"ENVIRONMENT": "production"},
    ],
)
def test_invalid_settings_are_rejected(overrides):
    with pytest.raises(ValueError):
        Settings(**URLS, SUPABASE_URL="", SUPABASE_SERVICE_KEY="", **overrides)


def test_production_with_storage_credentials():
    s = Settings(**URLS, ENVIRONMENT="production", SUPABASE_URL="https://x.supabase.co", SUPABASE_SERVICE_KEY="key")
    assert s.ENVIRONMENT == "production"


def test_engine_options_per_backend():
    assert engine_options("sqlite+aiosqlite:///./dev.db") == {}
    assert engine_options("postgresql+asyncpg://u:p@db/backoffice")["pool_pre_ping"] is True
