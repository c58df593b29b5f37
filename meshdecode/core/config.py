"""Configuration management for meshdecode using Pydantic."""

from pathlib import Path
from typing import Literal, Optional

import tomli
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from meshdecode.core.exceptions import ConfigurationError


class DecoderConfig(BaseModel):
    """Configuration for the format decoders."""

    model_config = ConfigDict(frozen=True)

    strict_ply: bool = Field(
        False,
        description="Raise on malformed PLY rows instead of repairing them",
    )
    warn_on_empty: bool = Field(
        True, description="Issue a warning when an ASCII STL has no facets"
    )


class LoaderConfig(BaseModel):
    """Configuration for reading mesh files from disk."""

    model_config = ConfigDict(frozen=True)

    max_file_size: int = Field(
        1_000_000_000, gt=0, description="Maximum file size in bytes"
    )
    parallel: bool = Field(False, description="Decode batches on a thread pool")
    max_workers: Optional[int] = Field(
        None, ge=1, description="Max workers for batch decoding (None = auto)"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    model_config = ConfigDict(frozen=True)

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Logging level"
    )
    format: Literal["json", "console", "plain"] = Field(
        "console", description="Log format"
    )
    colorize: bool = Field(True, description="Colorize console output")
    add_caller_info: bool = Field(
        False, description="Add filename, line number and function to events"
    )
    timestamp_format: str = Field("iso", description="structlog timestamp format")


class Config(BaseModel):
    """Main configuration for meshdecode."""

    model_config = ConfigDict(frozen=True)

    decoder: DecoderConfig = Field(
        default_factory=DecoderConfig, description="Decoder configuration"
    )
    loader: LoaderConfig = Field(
        default_factory=LoaderConfig, description="Loader configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @classmethod
    def from_toml(cls, path: Path | str) -> "Config":
        """Load configuration from TOML file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            tomli.TOMLDecodeError: If TOML is invalid
            ConfigurationError: If values fail validation
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "rb") as f:
            data = tomli.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance

        Raises:
            ConfigurationError: If values fail validation
        """
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(str(e), {"errors": e.errors()}) from e

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return self.model_dump(exclude_none=True)

    def save_toml(self, path: Path | str) -> None:
        """Save configuration to TOML file.

        Args:
            path: Path to save TOML file
        """
        import tomli_w

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "wb") as f:
            tomli_w.dump(self.to_dict(), f)


def get_default_config() -> Config:
    """Get default configuration."""
    return Config()


def load_config(path: Optional[Path | str] = None) -> Config:
    """Load configuration from file or return defaults.

    Args:
        path: Optional path to configuration file

    Returns:
        Config instance
    """
    if path:
        return Config.from_toml(path)
    return get_default_config()
