"""Settings read from the environment when the process starts."""

import os
import secrets
from dataclasses import dataclass, field


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).strip().lower() == "true"


def _env_int(name: str, default: int | None = None) -> int | None:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


def _env_list(name: str, default: str) -> list[str]:
    """Split a comma-separated variable, ignoring blank items."""
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass(frozen=True)
class GameConfig:
    """Table rules and dealing."""

    # Dealer draws below this score
    dealer_stand_threshold: int = field(
        default_factory=lambda: _env_int("BLACKJACK_DEALER_STANDS", 17)
    )
    # Unset means every process deals differently
    seed: int | None = field(default_factory=lambda: _env_int("BLACKJACK_SEED"))


@dataclass(frozen=True)
class SecurityConfig:
    """Key used to sign session tokens."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY") or secrets.token_urlsafe(32)
    )


@dataclass(frozen=True)
class CORSConfig:
    allowed_origins: list[str] = field(
        default_factory=lambda: _env_list("CORS_ORIGINS", "http://localhost:8000")
    )
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    enabled: bool = field(default_factory=lambda: _env_flag("RATE_LIMIT_ENABLED", True))
    requests_per_minute: int = field(default_factory=lambda: _env_int("RATE_LIMIT_RPM", 60))

    @property
    def limit(self) -> str:
        """The limit in slowapi's notation."""
        return f"{self.requests_per_minute}/minute"


@dataclass(frozen=True)
class AppConfig:
    """Everything the API needs, grouped by concern."""

    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", False))
    # Seconds a session survives without a write
    session_ttl: int = field(default_factory=lambda: _env_int("SESSION_TTL", 3600))

    game: GameConfig = field(default_factory=GameConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)


config = AppConfig()
