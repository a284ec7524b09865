from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── App ──────────────────────────────────────────────
    app_name: str = "apiguard"
    app_version: str = "0.1.0"
    debug: bool = False

    # ── Security ─────────────────────────────────────────
    # Firewall/provider key stamped on every token built by the API-key
    # authenticator.  Tokens carrying any other key are not ours to handle.
    provider_key: str = "api"
    app_secret_header: str = "X-API-App-Secret"
    api_key_header: str = "X-API-Key"

    # ── PostgreSQL ───────────────────────────────────────
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "apiguard"
    postgres_password: str = "apiguard"
    postgres_db: str = "apiguard"
    postgres_pool_size: int = 5

    @property
    def postgres_dsn(self) -> str:
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool = True

    # ── Server ───────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8000


settings = Settings()
