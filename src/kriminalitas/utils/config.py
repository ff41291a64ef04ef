"""Configuration management for the crime reporting API."""
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    host: str = "localhost"
    port: int = 5432
    database: str = "kriminalitas_db"
    username: str = "postgres"
    password: str = ""
    pool_size: int = 10
    max_overflow: int = 20
    statement_timeout_ms: int = 15000

    model_config = {"env_prefix": "DB_"}

    @property
    def url(self) -> str:
        """Get SQLAlchemy database URL."""
        return f"postgresql://{self.username}:{self.password}@{self.host}:{self.port}/{self.database}"


class ReportSettings(BaseSettings):
    """Window sizes and row caps for the dashboard reporters."""

    trend_window_days: int = 30
    district_limit: int = 10
    hotspot_limit: int = 6
    top_types_limit: int = 5
    recent_limit: int = 5
    search_limit: int = 100

    model_config = {"env_prefix": "REPORT_"}


class SpatialSettings(BaseSettings):
    """Spatial data settings."""

    srid: int = 4326  # WGS84
    areas_geojson: str = "data/areas.geojson"

    # Choropleth classes, matching the dashboard map legend
    high_threshold: int = 20
    medium_threshold: int = 5
    high_label: str = "Tinggi"
    medium_label: str = "Sedang"
    low_label: str = "Rendah"
    high_color: str = "#ea580c"
    medium_color: str = "#f59e0b"
    low_color: str = "#16a34a"


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"
    files: Dict[str, str] = {
        "api": "logs/api.log",
        "cli": "logs/cli.log",
    }
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5

    model_config = {"env_prefix": "LOG_"}  # Maps level field to LOG_LEVEL env var


class Settings(BaseSettings):
    """Main application settings."""

    environment: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Sub-settings, built per instance so each load reads the current environment
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    reports: ReportSettings = Field(default_factory=ReportSettings)
    spatial: SpatialSettings = Field(default_factory=SpatialSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = {"env_file": ".env", "extra": "ignore"}


def _resolve_template_strings(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Resolve ${ENV_VAR:default} template strings in configuration.

    Args:
        config_dict: Configuration dictionary with potential template strings

    Returns:
        Configuration dictionary with resolved template strings
    """

    def resolve_value(value):
        if isinstance(value, str):
            # Pattern matches ${ENV_VAR:default_value} or ${ENV_VAR}
            pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

            def replace_match(match):
                env_var = match.group(1)
                default_value = match.group(2) if match.group(2) is not None else ""
                return os.getenv(env_var, default_value)

            return re.sub(pattern, replace_match, value)
        elif isinstance(value, dict):
            return {k: resolve_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [resolve_value(item) for item in value]
        else:
            return value

    return resolve_value(config_dict)


def load_config(config_path: Optional[Path] = None) -> Settings:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to YAML config file. Defaults to config/config.yaml

    Returns:
        Settings object with loaded configuration
    """
    if config_path is None:
        config_path = Path("config/config.yaml")

    settings = Settings()

    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f)

        if yaml_config:
            yaml_config = _resolve_template_strings(yaml_config)
            _update_settings_from_dict(settings, yaml_config)

    return settings


def _update_settings_from_dict(settings: Settings, config_dict: Dict[str, Any]) -> None:
    """Update settings object with values from dictionary.

    Nested sections are merged key by key; unknown keys are ignored.
    """
    for key, value in config_dict.items():
        if not hasattr(settings, key):
            continue
        attr = getattr(settings, key)
        if isinstance(attr, BaseSettings):
            if isinstance(value, dict):
                for nested_key, nested_value in value.items():
                    if hasattr(attr, nested_key):
                        setattr(attr, nested_key, nested_value)
        else:
            setattr(settings, key, value)


def validate_configuration(settings: Settings) -> None:
    """Validate configuration and warn about insecure settings.

    Args:
        settings: Settings object to validate

    Raises:
        ValueError: If critical security issues detected in production
    """
    import warnings

    if settings.database.password in ["postgres", "password", "", "1sampai8"]:
        if settings.environment == "production":
            raise ValueError(
                "SECURITY ERROR: Default database password detected in production. "
                "Set a strong password in DB_PASSWORD environment variable."
            )
        else:
            warnings.warn(
                "Using default database password. This is OK for development, "
                "but NEVER use default passwords in production.",
                UserWarning,
            )

    cors_origins = os.getenv("CORS_ORIGINS", "")
    if "*" in cors_origins and settings.environment == "production":
        raise ValueError(
            "SECURITY ERROR: Wildcard CORS origin (*) detected in production. "
            "Set specific allowed origins in CORS_ORIGINS environment variable."
        )

    if settings.spatial.medium_threshold > settings.spatial.high_threshold:
        raise ValueError(
            "spatial.medium_threshold must not exceed spatial.high_threshold"
        )


# Global settings instance
settings = load_config()

# Validate configuration on load
validate_configuration(settings)
