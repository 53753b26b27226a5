"""Configuration management for stlconvert."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Encoding


class STLConvertSettings(BaseSettings):
    """stlconvert application settings."""

    model_config = SettingsConfigDict(
        env_prefix="STLCONVERT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging Configuration
    log_level: str = Field("INFO", description="Logging level")
    verbose: bool = Field(False, description="Enable verbose logging")

    # Output Configuration
    ascii_output_dir: str = Field("output-ascii", description="Folder for files converted to ASCII")
    binary_output_dir: str = Field("output-binary", description="Folder for files converted to binary")
    ascii_prefix: str = Field("ascii-", description="Filename prefix for files converted to ASCII")
    binary_prefix: str = Field("binary-", description="Filename prefix for files converted to binary")

    def get_log_level(self) -> str:
        """Effective log level, DEBUG when verbose."""
        return "DEBUG" if self.verbose else self.log_level.upper()

    def output_path(self, input_path: Path, target: Encoding, output_dir: Optional[Path] = None) -> Path:
        """Derive the output file for an input converted into ``target``."""
        base_dir = output_dir if output_dir is not None else input_path.parent
        if target is Encoding.ASCII:
            return base_dir / self.ascii_output_dir / f"{self.ascii_prefix}{input_path.name}"
        return base_dir / self.binary_output_dir / f"{self.binary_prefix}{input_path.name}"


# Global settings instance
_settings: Optional[STLConvertSettings] = None


def get_settings() -> STLConvertSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = STLConvertSettings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (mainly for testing)."""
    global _settings
    _settings = None
