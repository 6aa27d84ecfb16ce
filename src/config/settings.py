"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use LITDOWN_ prefix (e.g., LITDOWN_TIMEOUT=10).

Settings can also be loaded from a .env file in the project root.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use LITDOWN_ prefix.

    Examples:
        LITDOWN_TIMEOUT=10
        LITDOWN_PATH=/books/go/ch01/module.md
        LITDOWN_ORIGIN=/books/go/ch01
    """

    model_config = SettingsConfigDict(
        env_prefix="LITDOWN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Execution configuration
    timeout: float = Field(
        default=5.0,
        description="Seconds allowed for the whole parse/execute/render pipeline (0 means default)",
    )

    poll_interval: float = Field(
        default=0.05,
        description="Seconds between cancellation checks while a command runs",
    )

    # Rendering configuration
    break_marker: str = Field(
        default="\n<!--BREAK-->\n",
        description="Literal inserted after every page except the last",
    )

    # Path configuration
    path: Optional[str] = Field(
        default=None,
        description="Path of the document being rendered; its directory is the source root",
    )

    origin: Optional[str] = Field(
        default=None,
        description="Working directory override for executed code",
    )

    @field_validator("timeout")
    @classmethod
    def timeout_default(cls, value: float) -> float:
        if value <= 0:
            return 5.0
        return value

    def root_get(self) -> Optional[Path]:
        """Directory of LITDOWN_PATH, or None when unset"""
        if not self.path:
            return None
        return Path(self.path).parent

    def filename_get(self) -> Optional[str]:
        """Base name of LITDOWN_PATH, or None when unset"""
        if not self.path:
            return None
        return Path(self.path).name


# Singleton instance - import this in your code
appsettings = AppSettings()
