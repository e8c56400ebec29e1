"""Runtime settings for backup-spine.

Configuration is read from ``BACKUP_SPINE_*`` environment variables and an
optional ``.env`` file. Defaults match the resource-level defaults of the
backup schedule API.

Examples:
    >>> from backup_spine.core.settings import BackupSpineSettings
    >>> BackupSpineSettings().history_limit
    10

Tags:
    settings, configuration, pydantic, environment, backup-spine

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackupSpineSettings(BaseSettings):
    """Settings shared by the policy validators and the schedule tracker.

    Fields
    ──────
    history_limit         : Capacity of each schedule's run-history ring
    default_max_retries   : Retries used when a schedule does not set one
    log_level             : Structlog log level
    json_logs             : Force JSON (True) or console (False) log output
    service_name          : Service name stamped on every log line
    """

    model_config = SettingsConfigDict(
        env_prefix="BACKUP_SPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── History ──────────────────────────────────────────────────
    history_limit: int = Field(default=10, ge=1)
    default_max_retries: int = Field(default=3, ge=1, le=5)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None
    service_name: str = "backup-spine"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> BackupSpineSettings:
    """Return the process-wide settings instance."""
    return BackupSpineSettings()
