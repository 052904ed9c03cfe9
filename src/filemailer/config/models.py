"""Configuration models using Pydantic for validation."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class WatchSettings(BaseModel):
    """Settings for the watched folder and the files it forwards."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    folder: Path = Field(description="Folder to monitor for new files")
    filetypes: list[str] = Field(
        default_factory=list,
        description="Regular expressions matched against file extensions (without the dot)",
    )
    save_folder: str = Field(
        default="save", description="Sub-folder of the watched folder that receives sent files"
    )
    settle_seconds: float = Field(
        default=1.0, ge=0.0, description="Wait time before reading a newly created file"
    )

    @field_validator("save_folder")
    @classmethod
    def validate_save_folder(cls, v: str) -> str:
        """Ensure the save folder is a plain relative name."""
        v = v.strip()
        if not v:
            raise ValueError("save_folder must not be empty")
        if Path(v).is_absolute() or ".." in Path(v).parts:
            raise ValueError("save_folder must be relative to the watched folder")
        return v.rstrip("/\\")

    @property
    def save_path(self) -> Path:
        """Folder that sent files are moved into."""
        return self.folder / self.save_folder


class EmailSettings(BaseModel):
    """Sender and addressees of outgoing messages."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sender: str = Field(description="From address")
    addressees: list[str] = Field(description="Recipient addresses")

    @field_validator("addressees")
    @classmethod
    def validate_addressees(cls, v: list[str]) -> list[str]:
        """Drop blanks and duplicates, keep order, require at least one."""
        seen: list[str] = []
        for address in v:
            address = address.strip()
            if address and address not in seen:
                seen.append(address)
        if not seen:
            raise ValueError("At least one addressee must be specified")
        return seen


class SMTPSettings(BaseModel):
    """Mail server connection settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    host: str = Field(description="SMTP server host name")
    port: int = Field(default=465, ge=1, le=65535, description="SMTPS port (implicit TLS)")
    username: str = Field(default="", description="Login user name")
    password: SecretStr = Field(default=SecretStr(""), description="Login password")
    timeout_seconds: float | None = Field(
        default=None, gt=0, description="Socket timeout for the mail server (none by default)"
    )
    verify_certificate: bool = Field(
        default=True, description="Verify the server's TLS certificate"
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_dir: Path = Field(default=Path("logs"), description="Directory for log files")
    max_bytes: int = Field(
        default=10 * 1024 * 1024, ge=1024, description="Max log file size before rotation (bytes)"
    )
    backup_count: int = Field(default=5, ge=1, description="Number of rotated log files to keep")
    console_enabled: bool = Field(default=True, description="Enable console logging")
    file_enabled: bool = Field(default=False, description="Enable file logging")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper


class FileMailerConfig(BaseModel):
    """Main configuration for FileMailer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    watch: WatchSettings = Field(description="Watched folder settings")
    email: EmailSettings = Field(description="Message addressing")
    smtp: SMTPSettings = Field(description="Mail server settings")
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings, description="Logging settings"
    )
