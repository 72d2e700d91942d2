"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
Configuration management for IMPORTORDER.

This module provides a central location for all configuration settings. It
handles environment variables, default values, and validation of configuration
parameters for logging and for the formatter runs.
"""

import logging
import os
from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator

from importorder.order_spec import DEFAULT_IMPORT_ORDER, OrderSpec, compile_order_spec
from importorder.work_queue import WorkerType

logger = logging.getLogger(__name__)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class BaseConfig(BaseModel):
    """Base configuration class with common functionality."""

    # Class variable to store environment variable prefixes
    ENV_PREFIX: ClassVar[str] = "IMPORTORDER_"

    @classmethod
    def from_env(cls, **overrides) -> "BaseConfig":
        """
        Create a configuration instance from environment variables.

        Args:
        ----
            **overrides: Key-value pairs that override environment variables

        Returns:
        -------
            An instance of the configuration class

        """
        raise NotImplementedError("Subclasses must implement from_env method")

    @classmethod
    def get_env_var(cls, key: str, default: Any = None) -> Any:
        """
        Get an environment variable with the class prefix.

        Args:
        ----
            key: Key name without prefix
            default: Default value if environment variable is not found

        Returns:
        -------
            The environment variable value or default

        """
        env_key = f"{cls.ENV_PREFIX}{key.upper()}"
        return os.environ.get(env_key, default)


class LoggingConfig(BaseConfig):
    """Configuration for logging settings."""

    level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    use_rich: bool = Field(
        default=True,
        description="Whether to use rich for console logging",
    )
    log_file: str | None = Field(
        default=None,
        description="Path to the log file (None for console-only logging)",
    )
    json_format: bool = Field(
        default=False,
        description="Whether to use JSON format for logs",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, value):
        """Validate that the log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        value = value.upper()
        if value not in valid_levels:
            logger.warning(f"Invalid log level '{value}', defaulting to INFO")
            return "INFO"
        return value

    @classmethod
    def from_env(cls, **overrides) -> "LoggingConfig":
        """Create a logging configuration from environment variables."""
        config = {
            "level": cls.get_env_var("LOG_LEVEL", "INFO"),
            "use_rich": _env_bool(cls.get_env_var("LOG_USE_RICH", "true")),
            "log_file": cls.get_env_var("LOG_FILE", None),
            "json_format": _env_bool(cls.get_env_var("LOG_JSON", "false")),
        }

        # Override with any directly provided values
        config.update(overrides)

        return cls(**config)

    def get_log_level_int(self) -> int:
        """Get the numeric logging level."""
        return getattr(logging, self.level)

    def configure_logging(self, debug: bool = False) -> None:
        """
        Configure logging based on the settings.

        Args:
        ----
            debug: Whether to force debug mode

        """
        from importorder.core.logging import configure_logging as configure_contextual_logging

        configure_contextual_logging(
            level=logging.DEBUG if debug else self.get_log_level_int(),
            log_file=self.log_file,
            json_format=self.json_format,
            include_timestamp=True,
            use_rich=self.use_rich,
            debug=debug,
        )


class FormatterConfig(BaseConfig):
    """Configuration for formatting runs."""

    import_order: list[str] | None = Field(
        default=None,
        description="Ordered group descriptors; '' is the other bucket, '#' the static bucket",
    )
    strict: bool = Field(
        default=False,
        description="Reject empty orders and orders missing a catch-all bucket",
    )
    max_workers: int = Field(
        default_factory=lambda: min(32, (os.cpu_count() or 1) + 4),
        description="Maximum number of files formatted concurrently",
    )
    worker_type: WorkerType = Field(
        default=WorkerType.THREAD,
        description="Worker pool type (thread, process)",
    )
    file_suffix: str = Field(
        default=".java",
        description="Suffix of the source files to format",
    )
    qa_dir: str = Field(
        default="qa/format",
        description="Directory, relative to the project root, holding generated rules files",
    )
    import_order_file_name: str = Field(
        default="java.importorder",
        description="File name of the generated import order rules file",
    )
    encoding: str = Field(
        default="utf-8",
        description="Encoding of the source files",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, value):
        """Validate that at least one worker is allowed."""
        if value < 1:
            raise ValueError("max_workers must be at least 1")
        return value

    @field_validator("file_suffix")
    @classmethod
    def validate_file_suffix(cls, value):
        """Validate that the suffix looks like a file extension."""
        if not value.startswith(".") or len(value) < 2:
            raise ValueError(f"file_suffix must start with '.', got {value!r}")
        return value

    @classmethod
    def from_env(cls, **overrides) -> "FormatterConfig":
        """Create a formatter configuration from environment variables."""
        config: dict[str, Any] = {
            "strict": _env_bool(cls.get_env_var("STRICT", "false")),
            "worker_type": cls.get_env_var("WORKER_TYPE", WorkerType.THREAD.value).lower(),
            "file_suffix": cls.get_env_var("FILE_SUFFIX", ".java"),
            "qa_dir": cls.get_env_var("QA_DIR", "qa/format"),
            "import_order_file_name": cls.get_env_var("IMPORT_ORDER_FILE", "java.importorder"),
            "encoding": cls.get_env_var("ENCODING", "utf-8"),
        }

        import_order = cls.get_env_var("IMPORT_ORDER")
        if import_order is not None:
            # Comma separated; an empty item is the other bucket
            config["import_order"] = import_order.split(",") if import_order else []

        max_workers = cls.get_env_var("MAX_WORKERS")
        if max_workers is not None:
            # Validated and coerced by pydantic
            config["max_workers"] = max_workers

        # Override with any directly provided values that are set
        config.update({key: value for key, value in overrides.items() if value is not None})

        return cls(**config)

    def get_import_order(self) -> list[str]:
        """Configured descriptors, or the default Java order when none are configured."""
        if self.import_order is None:
            return list(DEFAULT_IMPORT_ORDER)
        return list(self.import_order)

    def compile_order_spec(self) -> OrderSpec:
        """
        Compile the configured import order.

        Raises
        ------
            InvalidOrderSpec: If the configured order is invalid

        """
        return compile_order_spec(self.get_import_order(), strict=self.strict)

    def get_import_order_file_path(self, project_dir: Path | str) -> Path:
        """Path of the import order rules file for a project."""
        return Path(project_dir) / self.qa_dir / self.import_order_file_name


class AppConfig(BaseConfig):
    """Main application configuration that aggregates all other configurations."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )
    formatter: FormatterConfig = Field(
        default_factory=FormatterConfig,
        description="Formatter configuration",
    )
    debug: bool = Field(
        default=False,
        description="Debug mode flag",
    )

    @classmethod
    def from_env(cls, **overrides) -> "AppConfig":
        """Create an application configuration from environment variables."""
        config: dict[str, Any] = {
            "logging": LoggingConfig.from_env(),
            "formatter": FormatterConfig.from_env(),
            "debug": _env_bool(cls.get_env_var("DEBUG", "false")),
        }

        for key, value in overrides.items():
            if key == "logging" and isinstance(value, dict):
                config[key] = LoggingConfig.from_env(**value)
            elif key == "formatter" and isinstance(value, dict):
                config[key] = FormatterConfig.from_env(**value)
            elif value is not None:
                config[key] = value

        return cls(**config)

    def configure_logging(self) -> None:
        """Configure logging based on the settings."""
        self.logging.configure_logging(debug=self.debug)


# Global app configuration
_app_config = None


def get_app_config() -> AppConfig:
    """
    Get the global application configuration.

    Returns
    -------
        The application configuration instance

    """
    global _app_config
    if _app_config is None:
        _app_config = AppConfig.from_env()
    return _app_config


def init_app_config(config: AppConfig | None = None, **kwargs) -> AppConfig:
    """
    Initialize the global application configuration.

    Args:
    ----
        config: An existing AppConfig instance
        **kwargs: Key-value pairs for creating a new AppConfig

    Returns:
    -------
        The application configuration instance

    """
    global _app_config
    _app_config = config if config is not None else AppConfig.from_env(**kwargs)
    return _app_config
