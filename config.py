# config.py — configuration built once at startup, passed to the store and blueprints
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

AGE_GATE_MODES = ("room", "global", "off")
ROOM_CREATE_MODES = ("admin", "open")

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class RoomsConfig:
    data_dir: Path
    admin_pass: str
    max_file_bytes: int
    port: int = 10000
    jwt_secret: str = "rooms-dev-secret-change-me-in-production"
    admin_ttl_min: int = 24 * 60
    age_gate: str = "room"
    age_gate_files: bool = False
    age_ttl_days: int = 365
    room_create: str = "admin"
    admin_query_token: bool = False
    login_rate_limit: str = "10/minute"
    rate_limit_default: str = "120/minute"
    rate_limit_enabled: bool = True
    cors_origins: tuple = ("*",)
    logs_dir: Optional[Path] = None

    @property
    def room_create_requires_admin(self) -> bool:
        return self.room_create == "admin"

    def with_overrides(self, **kw):
        return replace(self, **kw)


def _flag(name, raw) -> bool:
    v = str(raw).strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{name}: expected a boolean, got {raw!r}")


def _int(name, raw) -> int:
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ValueError(f"{name}: expected an integer, got {raw!r}") from None


def _choice(name, raw, allowed) -> str:
    v = str(raw).strip().lower()
    if v not in allowed:
        raise ValueError(f"{name}: expected one of {', '.join(allowed)}, got {raw!r}")
    return v


def load_config(overrides=None, environ=None) -> RoomsConfig:
    """
    Builds the RoomsConfig from the environment. `overrides` uses the same
    keys as the environment (DATA_DIR, ADMIN_PASS, MAX_FILE_MB, ...) and wins
    over it; MAX_FILE_BYTES, when given, wins over MAX_FILE_MB.
    """
    env = dict(os.environ if environ is None else environ)
    if overrides:
        env.update({k: v for k, v in overrides.items() if v is not None})

    def get(key, default):
        return env.get(key, default)

    max_bytes = get("MAX_FILE_BYTES", None)
    if max_bytes is None:
        max_bytes = _int("MAX_FILE_MB", get("MAX_FILE_MB", "25")) * 1024 * 1024
    else:
        max_bytes = _int("MAX_FILE_BYTES", max_bytes)
    if max_bytes <= 0:
        raise ValueError("MAX_FILE_BYTES must be positive")

    admin_pass = str(get("ADMIN_PASS", "letmein"))
    if not admin_pass.strip():
        raise ValueError("ADMIN_PASS must not be empty")

    # relative defaults resolve against the working directory
    logs_dir = get("LOGS_DIR", "logs")
    origins = get("CORS_ORIGINS", "*")
    if isinstance(origins, str):
        origins = [o.strip() for o in origins.split(",") if o.strip()] or ["*"]

    return RoomsConfig(
        data_dir=Path(get("DATA_DIR", "data")).resolve(),
        admin_pass=admin_pass,
        max_file_bytes=max_bytes,
        port=_int("PORT", get("PORT", "10000")),
        jwt_secret=str(get("JWT_SECRET", RoomsConfig.jwt_secret)),
        admin_ttl_min=_int("ADMIN_TTL_MIN", get("ADMIN_TTL_MIN", str(24 * 60))),
        age_gate=_choice("AGE_GATE", get("AGE_GATE", "room"), AGE_GATE_MODES),
        age_gate_files=_flag("AGE_GATE_FILES", get("AGE_GATE_FILES", "false")),
        age_ttl_days=_int("AGE_TTL_DAYS", get("AGE_TTL_DAYS", "365")),
        room_create=_choice("ROOM_CREATE", get("ROOM_CREATE", "admin"), ROOM_CREATE_MODES),
        admin_query_token=_flag("ADMIN_QUERY_TOKEN", get("ADMIN_QUERY_TOKEN", "false")),
        login_rate_limit=str(get("LOGIN_RATE_LIMIT", "10/minute")),
        rate_limit_default=str(get("RATE_LIMIT_DEFAULT", "120/minute")),
        rate_limit_enabled=_flag("RATE_LIMIT_ENABLED", get("RATE_LIMIT_ENABLED", "true")),
        cors_origins=tuple(origins),
        logs_dir=Path(logs_dir) if logs_dir else None,
    )
