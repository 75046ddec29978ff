from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from pathlib import Path
import os
import logging

logger = logging.getLogger("tagsinput.config")

# Module-level repo root to avoid Pydantic private attr behavior on class underscores
REPO_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    # Use environment variables with prefix TAGSINPUT_ and load from a repo-local .env file if present.
    model_config = SettingsConfigDict(
        env_prefix="TAGSINPUT_",
        env_file=str(REPO_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ENV: str = "dev"  # dev|test|prod
    LOG_LEVEL: str = "info"

    # Global option defaults (JSON file with a "tagsInput" object), applied
    # beneath per-instance options.
    OPTION_DEFAULTS_PATH: str | None = None

    # Trace every event bus trigger at DEBUG level
    LOG_EVENTS: bool = Field(default=False, description="Log each event bus trigger")


def _resolve_env_files_from_override(repo_root: Path) -> str | tuple[str, ...] | None:
    """Resolve optional override for dotenv file(s) using TAGSINPUT_ENV_FILE.

    Supports absolute or relative paths (relative to repo root) and
    comma-separated list for multiple env files (later items override earlier).
    """
    override = os.getenv("TAGSINPUT_ENV_FILE")
    if not override:
        return None

    def to_abs(p: str) -> str:
        path = Path(p)
        if not path.is_absolute():
            path = repo_root / p
        return str(path)

    parts = [p.strip() for p in override.split(",") if p.strip()]
    if not parts:
        return None
    if len(parts) == 1:
        return to_abs(parts[0])
    return tuple(to_abs(p) for p in parts)


def load_settings() -> Settings:
    """Build settings, honoring TAGSINPUT_ENV_FILE when set."""
    override = _resolve_env_files_from_override(REPO_ROOT)
    if override:
        return Settings(_env_file=override)  # type: ignore[call-arg]
    return Settings()


settings: Settings = load_settings()


def log_settings() -> None:
    logger.info("Configuration loaded: %s", settings)
