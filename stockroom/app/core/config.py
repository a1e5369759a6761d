from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_list(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """
    Configuration runtime, lue depuis l'environnement.

    Aucune valeur n'est lue au moment de l'import : create_app() appelle
    Settings.from_env() (ou reçoit un Settings construit par les tests).
    """

    database_url: str = "sqlite:///./stockroom.sqlite"
    sqlite_busy_timeout_ms: int = 5000
    api_prefix: str = "/v1"
    create_schema: bool = True
    recent_movements_limit: int = 200
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))
    frontend_dir: str | None = None

    admin_email: str = "admin@example.com"
    admin_name: str = "Administrator"
    admin_password: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            sqlite_busy_timeout_ms=_env_int("STOCKROOM_SQLITE_BUSY_TIMEOUT_MS", cls.sqlite_busy_timeout_ms),
            api_prefix=os.getenv("STOCKROOM_API_PREFIX", cls.api_prefix),
            create_schema=_env_bool("STOCKROOM_CREATE_SCHEMA", cls.create_schema),
            recent_movements_limit=_env_int("STOCKROOM_RECENT_MOVEMENTS", cls.recent_movements_limit),
            log_level=os.getenv("STOCKROOM_LOG_LEVEL", cls.log_level).upper(),
            cors_origins=_env_list("STOCKROOM_CORS_ORIGINS", "*"),
            frontend_dir=os.getenv("STOCKROOM_FRONTEND_DIR") or None,
            admin_email=os.getenv("STOCKROOM_ADMIN_EMAIL", cls.admin_email).strip().lower(),
            admin_name=os.getenv("STOCKROOM_ADMIN_NAME", cls.admin_name),
            admin_password=os.getenv("STOCKROOM_ADMIN_PASSWORD") or None,
        )
