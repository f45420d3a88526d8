"""Configuration loader for database, security, and service settings."""

from __future__ import annotations

import os
import secrets
import sys
from dataclasses import dataclass
from pathlib import Path

import yaml

from cekap_app.core.crypto import CryptoService


@dataclass(frozen=True)
class DatabaseConfig:
    path: str
    key_env: str
    allow_sqlite_fallback: bool


@dataclass(frozen=True)
class EncryptionConfig:
    key_env: str


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    format: str


@dataclass(frozen=True)
class AttachmentConfig:
    directory: str


@dataclass(frozen=True)
class SuggestionConfig:
    api_key_env: str
    model: str
    timeout_seconds: float


@dataclass(frozen=True)
class AuthConfig:
    owner_emails: tuple[str, ...]


@dataclass(frozen=True)
class AppConfig:
    database: DatabaseConfig
    encryption: EncryptionConfig
    logging: LoggingConfig
    attachments: AttachmentConfig
    suggestions: SuggestionConfig
    auth: AuthConfig


DEFAULT_CONFIG_REL_PATH = Path("config/app.yaml")
DEFAULT_DB_KEY_ENV = "CEKAP_DB_KEY"
DEFAULT_ENCRYPTION_KEY_ENV = "CEKAP_ENCRYPTION_KEY"
DEFAULT_DB_FILENAME = "cekap.db"
RUNTIME_ENV_REL_PATH = Path("config/runtime.env")
_RUNTIME_ENV_LOADED = False


def _split_key_value(raw_line: str) -> tuple[str, str] | None:
    """Parse a shell or PowerShell key assignment line."""
    line = raw_line.strip()
    if not line or line.startswith("#"):
        return None

    if line.startswith("$env:"):
        line = line[len("$env:") :]
    elif line.startswith("export "):
        line = line[len("export ") :]

    if "=" not in line:
        return None

    key, value = line.split("=", 1)
    key = key.strip()
    value = value.strip()
    if not key:
        return None

    if (value.startswith("'") and value.endswith("'")) or (
        value.startswith('"') and value.endswith('"')
    ):
        value = value[1:-1]

    return key, value


def _unique_paths(paths: list[Path]) -> list[Path]:
    unique: list[Path] = []
    seen: set[Path] = set()
    for path in paths:
        resolved = path.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        unique.append(resolved)
    return unique


def _iter_env_candidates() -> list[Path]:
    """Return candidate files that may contain runtime keys."""
    roots: list[Path] = [Path.cwd(), Path(__file__).resolve().parents[3]]
    if getattr(sys, "frozen", False):
        roots.insert(0, Path(sys.executable).resolve().parent)

    paths: list[Path] = []
    for root in roots:
        paths.extend([root / ".env.local", root / RUNTIME_ENV_REL_PATH])
    return _unique_paths(paths)


def _load_env_from_file(path: Path) -> None:
    """Load KEY=VALUE lines from a local file into process environment."""
    if not path.exists() or not path.is_file():
        return
    with path.open("r", encoding="utf-8") as file:
        for line in file:
            parsed = _split_key_value(line)
            if not parsed:
                continue
            key, value = parsed
            if key not in os.environ:
                os.environ[key] = value


def _runtime_root() -> Path:
    """Return writable root for runtime env creation."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[3]


def _runtime_env_path() -> Path:
    return _runtime_root() / RUNTIME_ENV_REL_PATH


def _write_runtime_env(db_key: str, encryption_key: str) -> None:
    """Persist generated runtime keys in config/runtime.env."""
    path = _runtime_env_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        f"{DEFAULT_DB_KEY_ENV}='{db_key}'\n{DEFAULT_ENCRYPTION_KEY_ENV}='{encryption_key}'\n",
        encoding="utf-8",
    )


def _existing_db_candidates(config_db_path: str | None = None) -> list[Path]:
    """Return likely DB paths that indicate existing encrypted data."""
    candidates: list[Path] = [
        _runtime_root() / DEFAULT_DB_FILENAME,
        Path.cwd() / DEFAULT_DB_FILENAME,
    ]
    if config_db_path:
        db_path = Path(config_db_path)
        if not db_path.is_absolute():
            db_path = Path.cwd() / db_path
        candidates.append(db_path)
    return _unique_paths(candidates)


def _ensure_runtime_env_loaded() -> None:
    """Load local env files once per process."""
    global _RUNTIME_ENV_LOADED
    if _RUNTIME_ENV_LOADED:
        return
    for path in _iter_env_candidates():
        _load_env_from_file(path)
    _RUNTIME_ENV_LOADED = True


def _bootstrap_default_keys_if_needed(config_db_path: str | None = None) -> None:
    """Auto-create default keys when no local key source exists."""
    db_key = os.getenv(DEFAULT_DB_KEY_ENV)
    encryption_key = os.getenv(DEFAULT_ENCRYPTION_KEY_ENV)
    if db_key and encryption_key:
        return

    has_existing_db = any(path.exists() for path in _existing_db_candidates(config_db_path))
    if has_existing_db and not _runtime_env_path().exists():
        raise RuntimeError(
            "Runtime key file is missing while database file exists. "
            f"Restore key file or set {DEFAULT_DB_KEY_ENV}/{DEFAULT_ENCRYPTION_KEY_ENV}."
        )

    db_key = db_key or secrets.token_urlsafe(48)
    encryption_key = encryption_key or CryptoService.generate_base64_key()
    os.environ[DEFAULT_DB_KEY_ENV] = db_key
    os.environ[DEFAULT_ENCRYPTION_KEY_ENV] = encryption_key
    _write_runtime_env(db_key, encryption_key)


def ensure_runtime_keys(config_db_path: str | None = None) -> None:
    """Ensure runtime keys are loaded or bootstrapped for a configured DB path."""
    _ensure_runtime_env_loaded()
    _bootstrap_default_keys_if_needed(config_db_path)


def resolve_default_config_path() -> Path:
    """Resolve configuration path for source and packaged execution."""
    env_path = os.getenv("CEKAP_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    candidates: list[Path] = []
    if getattr(sys, "frozen", False):
        candidates.append(Path(sys.executable).resolve().parent / DEFAULT_CONFIG_REL_PATH)
    candidates.append(Path.cwd() / DEFAULT_CONFIG_REL_PATH)
    candidates.append(Path(__file__).resolve().parents[3] / DEFAULT_CONFIG_REL_PATH)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return candidates[0]


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load the app configuration from YAML."""
    path = config_path or resolve_default_config_path()
    with path.open("r", encoding="utf-8") as file:
        raw = yaml.safe_load(file) or {}

    logging_raw = raw.get("logging") or {}
    attachments_raw = raw.get("attachments") or {}
    suggestions_raw = raw.get("suggestions") or {}
    auth_raw = raw.get("auth") or {}

    return AppConfig(
        database=DatabaseConfig(
            path=str(raw["db"]["path"]),
            key_env=str(raw["db"].get("key_env", DEFAULT_DB_KEY_ENV)),
            allow_sqlite_fallback=bool(raw["db"].get("allow_sqlite_fallback", False)),
        ),
        encryption=EncryptionConfig(
            key_env=str(raw["encryption"].get("key_env", DEFAULT_ENCRYPTION_KEY_ENV)),
        ),
        logging=LoggingConfig(
            level=str(logging_raw.get("level", "INFO")),
            format=str(logging_raw.get("format", "standard")),
        ),
        attachments=AttachmentConfig(
            directory=str(attachments_raw.get("directory", "attachments")),
        ),
        suggestions=SuggestionConfig(
            api_key_env=str(suggestions_raw.get("api_key_env", "CEKAP_GEMINI_API_KEY")),
            model=str(suggestions_raw.get("model", "gemini-2.0-flash")),
            timeout_seconds=float(suggestions_raw.get("timeout_seconds", 10)),
        ),
        auth=AuthConfig(
            owner_emails=tuple(
                str(email).strip().lower() for email in auth_raw.get("owner_emails", [])
            ),
        ),
    )


def get_required_env(name: str) -> str:
    """Return a required environment variable or raise a clear error."""
    _ensure_runtime_env_loaded()
    if name in {DEFAULT_DB_KEY_ENV, DEFAULT_ENCRYPTION_KEY_ENV}:
        _bootstrap_default_keys_if_needed()
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Required environment variable is missing: {name}")
    return value


def get_optional_env(name: str) -> str | None:
    """Return an optional secret such as a third-party API key."""
    _ensure_runtime_env_loaded()
    return os.getenv(name) or None
