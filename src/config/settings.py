# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: remote endpoint
credentials, local working trees, converter executables, notification
recipients, schedule and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === REMOTE STORE ===
    remote_store: Literal["sftp", "local"] = "sftp"
    ftp_host: str = ""
    ftp_port: int = 22
    ftp_user: str = ""
    ftp_password: str = ""
    ftp_key_path: str = ""
    ftp_timeout: float = 20.0

    # Prefix removed from a source folder to derive the batch type
    ftp_source_folder: str = ""
    ftp_folders_to_process: str = ""
    # Destination prefix; the batch type is appended as is, so end it with "/"
    # for a folder per type ("/out/" gives "/out/clientA")
    ftp_dest_folder: str = ""

    # Root directory standing in for the remote when REMOTE_STORE=local
    local_remote_root: str = ""

    # === Local trees ===
    work_root: Path = Path("./wip")
    archive_root: Path = Path("./archive")
    production_path: Path = Path("./production")

    # === Converter ===
    converter_merge_command: str = "TIFPDFMerger"
    converter_count_command: str = "TIFPDFCounter"

    # === Notification ===
    notifier: Literal["sendgrid", "none"] = "sendgrid"
    sendgrid_api_key: str = ""
    email_from: str = ""
    email_to: str = ""
    email_cc: str = ""
    report_template: Path | None = None

    # === Batching ===
    batch_gap_seconds: float = 300.0

    # === Schedule (Python weekday numbers, Monday == 0) ===
    schedule_days: str = "6,0,1,2,3,4"
    schedule_hour: int = 22
    schedule_minute: int = 0

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("batch_gap_seconds")
    @classmethod
    def validate_gap(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("batch_gap_seconds must be > 0")
        return v

    @field_validator("schedule_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:  # noqa: N805
        if not 0 <= v <= 23:
            raise ValueError("schedule_hour must be between 0 and 23")
        return v

    @field_validator("schedule_minute")
    @classmethod
    def validate_minute(cls, v: int) -> int:  # noqa: N805
        if not 0 <= v <= 59:
            raise ValueError("schedule_minute must be between 0 and 59")
        return v

    @field_validator("schedule_days")
    @classmethod
    def validate_days(cls, v: str) -> str:  # noqa: N805
        for part in v.split(","):
            part = part.strip()
            if not part:
                continue
            if not part.isdigit() or int(part) > 6:
                raise ValueError(
                    f"schedule_days entries must be weekday numbers 0-6, got {part!r}"
                )
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        # V-01: a batch type is the folder minus the source prefix
        if self.ftp_source_folder:
            outside = [
                f for f in self.folders_list
                if not f.startswith(self.ftp_source_folder)
            ]
            if outside:
                errors.append(
                    "FTP_FOLDERS_TO_PROCESS entries must start with "
                    f"FTP_SOURCE_FOLDER: {', '.join(outside)}"
                )

        # V-02: the work tree is emptied at the start of every pass
        work = self.work_root.resolve()
        for name, path in (
            ("ARCHIVE_ROOT", self.archive_root),
            ("PRODUCTION_PATH", self.production_path),
        ):
            kept = path.resolve()
            if kept.is_relative_to(work) or work.is_relative_to(kept):
                errors.append(f"WORK_ROOT and {name} must not overlap")

        # V-03
        if self.email_cc_list and not self.email_to_list:
            errors.append("EMAIL_CC requires at least one EMAIL_TO")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def folders_list(self) -> list[str]:
        """Parse comma-separated remote folders to process."""
        return _split(self.ftp_folders_to_process)

    @property
    def email_to_list(self) -> list[str]:
        """Parse comma-separated report recipients."""
        return _split(self.email_to)

    @property
    def email_cc_list(self) -> list[str]:
        """Parse comma-separated report cc addresses."""
        return _split(self.email_cc)

    @property
    def schedule_days_list(self) -> list[int]:
        """Parse comma-separated weekday numbers."""
        return sorted({int(d) for d in _split(self.schedule_days)})


def _split(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or one-off runs).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
