"""
Configuration management for sink dialects.

Uses Pydantic for validation and pydantic-settings for environment variable support.
"""

from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DialectConfig(BaseSettings):
    """Dialect configuration.

    Read once when a dialect is constructed; the dialect never re-reads it.

    Environment variables: DIALECT_DB_TIMEZONE, DIALECT_QUOTE_IDENTIFIERS,
    DIALECT_STRING_TYPE_LENGTH.
    """

    model_config = SettingsConfigDict(env_prefix="DIALECT_", frozen=True)

    db_timezone: str = Field(
        default="UTC",
        description="Timezone used when converting temporal values for the database",
    )
    quote_identifiers: str = Field(
        default="always",
        description="Identifier quoting: always or never",
    )
    string_type_length: int = Field(
        default=4000,
        ge=1,
        le=65535,
        description="Length of the VARCHAR type used by the generic string mapping",
    )

    @field_validator("db_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate the timezone name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Invalid db_timezone: {v!r}") from None
        return v

    @field_validator("quote_identifiers")
    @classmethod
    def validate_quote_identifiers(cls, v: str) -> str:
        """Normalize and validate the quoting mode."""
        v = v.lower().strip()
        valid_modes = ["always", "never"]
        if v not in valid_modes:
            raise ValueError(f"Invalid quote_identifiers: {v!r}. Must be one of {valid_modes}")
        return v

    @property
    def zone(self) -> ZoneInfo:
        """Get the configured timezone."""
        return ZoneInfo(self.db_timezone)


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        description="Log format"
    )

    # File logging
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_path: str = Field(default="logs/sink_dialects.log", description="Log file path")
    rotation: str = Field(default="100 MB", description="Log rotation size")
    retention: str = Field(default="30 days", description="Log retention period")

    # Console logging
    console_enabled: bool = Field(default=True, description="Enable console logging")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v


class Config(BaseSettings):
    """Main configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SINK_",
        case_sensitive=False,
    )

    version: str = Field(default="0.1.0", description="Package version")
    debug: bool = Field(default=False, description="Debug mode")

    # Sub-configurations
    dialect: DialectConfig = Field(default_factory=DialectConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def load_config_from_yaml(yaml_path: str) -> Config:
    """Load configuration from a YAML file.

    Note: Values loaded from YAML take precedence over environment variables.

    Args:
        yaml_path: Path to the YAML configuration file.

    Returns:
        Config instance loaded from the file.
    """
    import yaml

    yaml_file = Path(yaml_path)
    if not yaml_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

    with yaml_file.open("r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    config_classes = {
        "dialect": DialectConfig,
        "logging": LoggingConfig,
    }

    main_config = {}
    for key, value in config_dict.items():
        if key in config_classes:
            # Nested configs still read env vars for keys the file omits
            main_config[key] = config_classes[key](**(value or {}))
        else:
            main_config[key] = value

    return Config(**main_config)


def reload_config() -> Config:
    """Reload configuration from environment and YAML files."""
    global _config
    _config = None

    config_yaml = Path("config/config.yaml")
    if config_yaml.exists():
        _config = load_config_from_yaml(str(config_yaml))
    else:
        _config = Config()

    return _config
