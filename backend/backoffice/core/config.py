# backend/backoffice/core/config.py

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

from pydantic_settings import BaseSettings, SettingsConfigDict


def _strip_asyncpg_unsupported_params(url: str) -> str:
    """
    asyncpg does NOT accept sslmode or channel_binding as connect kwargs.
    If these appear in the URL query, SQLAlchemy can end up passing them to
    asyncpg.connect(), causing:
      TypeError: connect() got an unexpected keyword argument 'sslmode'
    """
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = parse_qsl(parts.query, keep_blank_values=True)
    filtered = [(k, v) for (k, v) in params if k not in {"sslmode", "channel_binding"}]
    new_query = urlencode(filtered, doseq=True)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, new_query, parts.fragment))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -----------------------------
    # Environment
    # -----------------------------
    # Use: development | staging | production
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # -----------------------------
    # DB
    # -----------------------------
    DATABASE_URL_ASYNC: str
    DATABASE_URL_SYNC: str

    # -----------------------------
    # Receipt storage (Supabase buckets)
    # -----------------------------
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_KEY: str = ""  # service role key, not the anon key

    # Payer receipts and acknowledgment receipts live in separate buckets.
    PAYER_RECEIPT_BUCKET: str = "Payment Receipt"
    ACK_RECEIPT_BUCKET: str = "ar-receipt"

    MAX_RECEIPT_BYTES: int = 10 * 1024 * 1024  # 10MB
    ALLOWED_RECEIPT_EXTENSIONS: list[str] = ["jpg", "jpeg", "png", "heic", "heif", "pdf"]

    # -----------------------------
    # Payments listing
    # -----------------------------
    PAYMENT_PAGE_SIZE: int = 50

    @property
    def DATABASE_URL_ASYNC_CLEAN(self) -> str:
        return _strip_asyncpg_unsupported_params(self.DATABASE_URL_ASYNC)

    def model_post_init(self, __context) -> None:  # pydantic v2 hook
        env = (self.ENVIRONMENT or "").strip().lower()

        if env in {"staging", "production"}:
            if not self.SUPABASE_URL.strip() or not self.SUPABASE_SERVICE_KEY.strip():
                raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set in staging/production.")

        # Light sanity checks (all envs)
        if self.PAYER_RECEIPT_BUCKET.strip() == self.ACK_RECEIPT_BUCKET.strip():
            raise ValueError("PAYER_RECEIPT_BUCKET and ACK_RECEIPT_BUCKET must name different buckets.")
        if self.PAYMENT_PAGE_SIZE < 1:
            raise ValueError(f"PAYMENT_PAGE_SIZE must be positive, got {self.PAYMENT_PAGE_SIZE!r}.")
        if self.MAX_RECEIPT_BYTES < 1:
            raise ValueError(f"MAX_RECEIPT_BYTES must be positive, got {self.MAX_RECEIPT_BYTES!r}.")


settings = Settings()
