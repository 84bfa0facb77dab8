"""Configuration management for the PrismaLens image editor."""

import os
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from dotenv import load_dotenv

from .errors import ConfigurationError
from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("config/app.yaml")


class ProviderSettings(BaseModel):
    """Everything the provider adapter needs, fixed at process start."""
    api_key: str
    model: str = "gemini-2.5-flash-image"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: float = 120.0
    default_media_type: str = "image/png"

    class Config:
        frozen = True


class Config(BaseModel):
    """Main application configuration."""

    # API Keys
    gemini_api_key: str = Field(default="", alias="GEMINI_API_KEY")

    # Provider
    gemini_model: str = Field(default="gemini-2.5-flash-image", alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    timeout_provider_seconds: float = Field(default=120.0, alias="TIMEOUT_PROVIDER_SECONDS")
    default_media_type: str = Field(default="image/png", alias="DEFAULT_MEDIA_TYPE")

    # Application Settings
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    max_sessions: int = Field(default=100, alias="MAX_SESSIONS")

    # Export
    export_prefix: str = Field(default="prismalens", alias="EXPORT_PREFIX")
    export_dir: Path = Field(default=Path("exports"), alias="EXPORT_DIR")

    class Config:
        populate_by_name = True

    def provider_settings(self) -> ProviderSettings:
        """
        Build the provider adapter's settings.

        Raises:
            ConfigurationError: If no API key is configured
        """
        if not self.gemini_api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set")

        return ProviderSettings(
            api_key=self.gemini_api_key,
            model=self.gemini_model,
            base_url=self.gemini_base_url,
            timeout_seconds=self.timeout_provider_seconds,
            default_media_type=self.default_media_type,
        )


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping")
    return data


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
) -> Config:
    """
    Load configuration from environment and an optional YAML file.

    Environment variables win over YAML values. When no path is given,
    config/app.yaml is read if it exists.

    Args:
        path: Explicit YAML file; must exist when given
        environ: Environment mapping (defaults to os.environ after .env is loaded)

    Returns:
        Config instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    if environ is None:
        load_dotenv()
        environ = dict(os.environ)

    if path is not None and not Path(path).exists():
        raise ConfigurationError(f"Config file not found at {path}")

    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH

    try:
        file_config = _read_yaml(config_path) if config_path.exists() else {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {config_path}: {e}")

    # Only pass through the environment variables Config knows about
    alias_to_field = {
        field.alias: name for name, field in Config.model_fields.items() if field.alias
    }
    env_config = {
        alias_to_field[key]: value for key, value in environ.items() if key in alias_to_field
    }

    try:
        config = Config(**{**file_config, **env_config})
    except PydanticValidationError as e:
        raise ConfigurationError(f"Failed to load configuration: {e}")

    logger.info(
        "Configuration loaded successfully",
        extra={
            "environment": config.app_env,
            "model": config.gemini_model,
            "config_file": str(config_path) if config_path.exists() else None,
        }
    )

    return config
