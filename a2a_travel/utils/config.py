"""Application configuration management.

This module provides configuration loading from environment variables and YAML files.
"""

import os
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import InvalidConfigurationError


def _env_number(key: str, cast: Callable[[str], Any]) -> Any:
    raw = os.getenv(key, "")
    try:
        return cast(raw)
    except ValueError as e:
        raise InvalidConfigurationError(key, raw, cause=e) from e


class LogFormat(str, Enum):
    """Log output format types."""

    JSON = "json"
    CONSOLE = "console"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: LogFormat = Field(default=LogFormat.JSON, description="Log format")
    file: str | None = Field(default=None, description="Optional log file path")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper


class ProviderConfig(BaseModel):
    """Primary (HTTP) data source configuration.

    When ``base_url`` is empty the provider is disabled and agents go
    straight to the fallback source.
    """

    base_url: str = Field(default="", description="Provider API base URL")
    api_key: str = Field(default="", description="Provider API key")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)


class AgentSettings(BaseModel):
    """Settings shared by all agents."""

    information_request_timeout: float = Field(
        default=2.0, description="Seconds to wait for an information_response"
    )
    random_seed: int | None = Field(
        default=None, description="Seed for the orchestrator's agent selection"
    )

    @field_validator("information_request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v


class WorkflowConfig(BaseModel):
    """Travel-plan workflow settings."""

    stage_timeout: float = Field(
        default=10.0, description="Max seconds to wait for each workflow stage"
    )
    accommodation_share: float = Field(
        default=0.4, description="Share of the budget allotted to accommodation"
    )
    default_departure_city: str = Field(
        default="New York", description="Departure city when none is given"
    )
    guests: int = Field(default=2, description="Default number of hotel guests")

    @field_validator("stage_timeout")
    @classmethod
    def validate_stage_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Stage timeout must be positive")
        return v

    @field_validator("accommodation_share")
    @classmethod
    def validate_share(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError("accommodation_share must be in (0.0, 1.0]")
        return v

    @field_validator("guests")
    @classmethod
    def validate_guests(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("guests must be positive")
        return v


class AppConfig(BaseModel):
    """Main application configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    flight_api: ProviderConfig = Field(default_factory=ProviderConfig)
    hotel_api: ProviderConfig = Field(default_factory=ProviderConfig)
    agents: AgentSettings = Field(default_factory=AgentSettings)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "AppConfig":
        """Load configuration from environment variables.

        Args:
            env_file: Optional path to .env file

        Returns:
            AppConfig instance populated from environment
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        return cls._apply_env_overrides(cls())

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "AppConfig":
        """Load configuration from YAML file.

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If YAML content is not a mapping
            InvalidConfigurationError: If a section has invalid values
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError("YAML content must be a dictionary")

        return cls._from_yaml_dict(data)

    @classmethod
    def _from_yaml_dict(cls, data: dict[str, Any]) -> "AppConfig":
        """Create config from parsed YAML dictionary."""
        sections: dict[str, type[BaseModel]] = {
            "logging": LoggingConfig,
            "flight_api": ProviderConfig,
            "hotel_api": ProviderConfig,
            "agents": AgentSettings,
            "workflow": WorkflowConfig,
        }
        config_data: dict[str, Any] = {}
        for key, model in sections.items():
            section = data.get(key)
            if section is None:
                continue
            if not isinstance(section, dict):
                raise InvalidConfigurationError(
                    key, section, f"Configuration section {key} must be a mapping"
                )
            try:
                config_data[key] = model(**section)
            except ValidationError as e:
                raise InvalidConfigurationError(
                    key, section, f"Invalid {key} configuration: {e}", cause=e
                ) from e
        return cls(**config_data)

    @classmethod
    def load(
        cls,
        yaml_path: str | Path | None = None,
        env_file: str | Path | None = None,
    ) -> "AppConfig":
        """Load configuration with YAML as base and environment overrides.

        Environment variables take precedence over YAML settings.
        """
        if yaml_path:
            config = cls.from_yaml(yaml_path)
        else:
            config = cls()

        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        return cls._apply_env_overrides(config)

    @classmethod
    def _apply_env_overrides(cls, config: "AppConfig") -> "AppConfig":
        """Apply environment variable overrides to existing config."""
        data = config.model_dump()

        # Logging
        if os.getenv("LOG_LEVEL"):
            data["logging"]["level"] = os.getenv("LOG_LEVEL", "INFO")
        if os.getenv("LOG_FORMAT"):
            data["logging"]["format"] = os.getenv("LOG_FORMAT", "json")
        if os.getenv("LOG_FILE"):
            data["logging"]["file"] = os.getenv("LOG_FILE")

        # Data providers
        for section, prefix in (("flight_api", "FLIGHT_API"), ("hotel_api", "HOTEL_API")):
            if os.getenv(f"{prefix}_BASE_URL"):
                data[section]["base_url"] = os.getenv(f"{prefix}_BASE_URL", "")
            if os.getenv(f"{prefix}_KEY"):
                data[section]["api_key"] = os.getenv(f"{prefix}_KEY", "")
            if os.getenv(f"{prefix}_TIMEOUT"):
                data[section]["timeout"] = _env_number(f"{prefix}_TIMEOUT", float)

        # Agents
        if os.getenv("INFORMATION_REQUEST_TIMEOUT"):
            data["agents"]["information_request_timeout"] = _env_number(
                "INFORMATION_REQUEST_TIMEOUT", float
            )
        if os.getenv("AGENT_RANDOM_SEED"):
            data["agents"]["random_seed"] = _env_number("AGENT_RANDOM_SEED", int)

        # Workflow
        if os.getenv("WORKFLOW_STAGE_TIMEOUT"):
            data["workflow"]["stage_timeout"] = _env_number(
                "WORKFLOW_STAGE_TIMEOUT", float
            )
        if os.getenv("WORKFLOW_ACCOMMODATION_SHARE"):
            data["workflow"]["accommodation_share"] = _env_number(
                "WORKFLOW_ACCOMMODATION_SHARE", float
            )
        if os.getenv("WORKFLOW_DEPARTURE_CITY"):
            data["workflow"]["default_departure_city"] = os.getenv(
                "WORKFLOW_DEPARTURE_CITY", "New York"
            )

        return cls._from_yaml_dict(data)


# Global configuration instance
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the global configuration instance.

    Raises:
        RuntimeError: If configuration has not been initialized
    """
    global _config
    if _config is None:
        raise RuntimeError("Configuration not initialized. Call init_config() first.")
    return _config


def init_config(
    yaml_path: str | Path | None = None,
    env_file: str | Path | None = None,
) -> AppConfig:
    """Initialize the global configuration."""
    global _config
    _config = AppConfig.load(yaml_path=yaml_path, env_file=env_file)
    return _config


def reset_config() -> None:
    """Reset the global configuration (mainly for testing)."""
    global _config
    _config = None
