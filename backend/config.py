import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent / ".env")


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _get_list(name: str, fallback: str = "") -> List[str]:
    raw_value = os.getenv(name, fallback)
    if not raw_value:
        return []
    return [item.strip() for item in raw_value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    supabase_url: str = _require_env("SUPABASE_URL")
    supabase_service_role_key: str = _require_env("SUPABASE_SERVICE_ROLE_KEY")
    allowed_origins: List[str] = field(
        default_factory=lambda: _get_list("ALLOWED_ORIGINS", "*")
    )
    document_number_min_digits: int = int(
        os.getenv("DOCUMENT_NUMBER_MIN_DIGITS", "3")
    )
    default_currency: str = os.getenv("DEFAULT_CURRENCY", "USD")
    auth_timeout_seconds: float = float(os.getenv("AUTH_TIMEOUT_SECONDS", "10"))
    sequence_timeout_seconds: float = float(
        os.getenv("SEQUENCE_TIMEOUT_SECONDS", "10")
    )


settings = Settings()
