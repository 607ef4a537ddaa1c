"""
Configuration module for the Record Lifecycle toolkit.

Provides centralized configuration for lifecycle persistence and default-read
filtering.
"""

import logging
from typing import Any, Dict, Optional, Union, get_args, get_origin

from pydantic import BaseModel, Field, field_validator


class LifecycleConfig(BaseModel):
    """Central configuration for lifecycle flags and read filtering.

    Configuration Sources (in order of precedence):
        1. Programmatic settings (highest priority)
        2. Environment variables (LIFECYCLE_ prefix)
        3. Default values (lowest priority)

    Example:
        >>> config = LifecycleConfig(commit_on_change=False)

        Loading from environment:

        >>> import os
        >>> os.environ['LIFECYCLE_DATABASE_URL'] = 'sqlite:///app.db'
        >>> config = LifecycleConfig.from_env()

    Environment Variables:
        - LIFECYCLE_APPLICATION_NAME
        - LIFECYCLE_DATABASE_URL
        - LIFECYCLE_COMMIT_ON_CHANGE
        - LIFECYCLE_FILTER_DEFAULT_READS
        - LIFECYCLE_INCLUDE_FLAGGED_OPTION
        - LIFECYCLE_LOG_LEVEL
    """

    # General settings
    application_name: str = Field(
        "Lifecycle Application", description="Name of the application"
    )
    environment: str = Field(
        "production", description="Environment (development, staging, production)"
    )
    database_url: Optional[str] = Field(
        None, description="Default database URL for the command-line tools"
    )

    # Persistence settings
    commit_on_change: bool = Field(
        True, description="Commit after each lifecycle change instead of flushing"
    )

    # Read filtering settings
    filter_default_reads: bool = Field(
        True, description="Exclude deleted and inactive records from ORM reads"
    )
    include_flagged_option: str = Field(
        "include_flagged",
        description="Execution option that bypasses the default-read filter",
        min_length=1,
    )

    # Logging
    log_level: str = Field("WARNING", description="Logging level name")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is valid."""
        valid_environments = {"development", "staging", "production", "testing"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Environment must be one of: {', '.join(sorted(valid_environments))}"
            )
        return v.lower()

    @field_validator("include_flagged_option")
    @classmethod
    def validate_option_name(cls, v: str) -> str:
        """Execution option names must be plain identifiers."""
        if not v.isidentifier():
            raise ValueError(f"'{v}' is not a valid execution option name")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure the level is one the logging module knows."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()

    @classmethod
    def from_env(cls, prefix: str = "LIFECYCLE_") -> "LifecycleConfig":
        """
        Load configuration from environment variables.

        Args:
            prefix: Prefix for environment variables

        Returns:
            Configuration instance
        """
        import os

        config_dict: Dict[str, Any] = {}

        for field_name, field_info in cls.model_fields.items():
            env_var = f"{prefix}{field_name.upper()}"
            if env_var not in os.environ:
                continue
            value = os.environ[env_var]

            field_type = field_info.annotation

            # Handle Optional types
            if get_origin(field_type) is Union:
                args = get_args(field_type)
                field_type = next((arg for arg in args if arg is not type(None)), str)

            if field_type == bool:
                config_dict[field_name] = value.lower() in ("true", "1", "yes", "on")
            else:
                config_dict[field_name] = value

        return cls.model_validate(config_dict)


# Global configuration instance
_config: Optional[LifecycleConfig] = None


def get_config() -> LifecycleConfig:
    """
    Get the global configuration instance.

    Returns:
        Global configuration
    """
    global _config

    if _config is None:
        _config = LifecycleConfig.from_env()

    return _config


def set_config(config: Optional[LifecycleConfig]) -> None:
    """
    Set the global configuration instance.

    Passing None drops the cached instance so the next ``get_config`` call
    reloads it from the environment.
    """
    global _config
    _config = config


def configure(**kwargs: Any) -> LifecycleConfig:
    """
    Configure the toolkit with keyword arguments.

    Args:
        **kwargs: Configuration parameters

    Returns:
        Updated configuration
    """
    global _config

    if _config is None:
        _config = LifecycleConfig(**kwargs)
    else:
        config_dict = _config.to_dict()
        config_dict.update(kwargs)
        _config = LifecycleConfig(**config_dict)

    return _config
