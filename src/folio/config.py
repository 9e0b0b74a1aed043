"""Environment-driven configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

_DEFAULT_RELAYS = "wss://relay.damus.io,wss://nos.lol"


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _env_float(key: str, default: float) -> float:
    raw = _env(key)
    return float(raw) if raw else default


def _env_int(key: str, default: int) -> int:
    raw = _env(key)
    return int(raw) if raw else default


def _env_list(key: str, default: str) -> tuple[str, ...]:
    raw = _env(key, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("FOLIO_ENV", "development"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class HistoryConfig:
    """Bounds for revision-source queries."""

    query_timeout: float = field(
        default_factory=lambda: _env_float("FOLIO_QUERY_TIMEOUT", 3.0)
    )
    query_limit: int = field(default_factory=lambda: _env_int("FOLIO_QUERY_LIMIT", 100))


@dataclass(frozen=True)
class PaymentConfig:
    """Payment attempt bounds and zap request relays."""

    timeout: float = field(
        default_factory=lambda: _env_float("FOLIO_PAYMENT_TIMEOUT", 30.0)
    )
    max_concurrency: int = field(
        default_factory=lambda: _env_int("FOLIO_PAYMENT_CONCURRENCY", 4)
    )
    lnurl_timeout: float = field(
        default_factory=lambda: _env_float("FOLIO_LNURL_TIMEOUT", 10.0)
    )
    zap_relays: tuple[str, ...] = field(
        default_factory=lambda: _env_list("FOLIO_ZAP_RELAYS", _DEFAULT_RELAYS)
    )


@dataclass(frozen=True)
class Settings:
    app: AppConfig = field(default_factory=AppConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    payments: PaymentConfig = field(default_factory=PaymentConfig)


def load_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
