"""Application configuration"""

from dataclasses import dataclass, field
from os import getenv
from pathlib import Path


def _split_tokens(value: str) -> list[str]:
    return [token.strip() for token in value.split(",") if token.strip()]


@dataclass
class Config:
    secret_key: str | None = field(default=getenv("CARDHUB_SECRET_KEY", ""))

    app_name: str = "cardhub"
    app_version: str = "0.1.0"

    # static tokens of staff clients (admin panel, provider portal)
    api_tokens: list[str] = field(
        default_factory=lambda: _split_tokens(getenv("CARDHUB_API_TOKENS", ""))
    )

    card_validity_days: int = field(
        default=int(getenv("CARDHUB_CARD_VALIDITY_DAYS", "730"))
    )
    usage_window_days: int = field(
        default=int(getenv("CARDHUB_USAGE_WINDOW_DAYS", "30"))
    )
    member_token_ttl_days: int = field(
        default=int(getenv("CARDHUB_MEMBER_TOKEN_TTL_DAYS", "28"))
    )
    card_expiry_job_enabled: bool = field(
        default=getenv("CARDHUB_CARD_EXPIRY_JOB", "").lower() in ("1", "true", "yes")
    )

    # Optional database URL for Postgres or other databases
    database_url_env: str | None = field(default=getenv("CARDHUB_DATABASE_URL", None))

    @property
    def database_path(self) -> Path:
        return Path("./data/") / Path(f"{self.app_name}.db")

    @property
    def database_url(self) -> str:
        # Use provided DATABASE_URL if available, else fall back to SQLite file
        if self.database_url_env:
            return self.database_url_env
        return f"sqlite:///{self.database_path}"


def get_config():
    return Config()
