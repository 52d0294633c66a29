"""
Environment-driven settings for the dump splitter.

Usage:
    from dumpsplit.config.settings import Config
    config = Config()
    config.reader.max_line_bytes

Environment Variables:
    DUMPSPLIT_MAX_LINE_BYTES: Largest single line accepted from the dump
    DUMPSPLIT_READ_BUFFER_BYTES: Buffer size used when reading the dump
    DUMPSPLIT_COMPRESS_LEVEL: Gzip level for compressed output (1-9)
    DUMPSPLIT_DIR_MODE: Octal permission bits for a created output directory
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from ..types import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINE_BYTES = 1024 * 1024 * 1024  # 1 GiB
DEFAULT_READ_BUFFER_BYTES = 64 * 1024


@dataclass
class ReaderConfig:
    """Input stream configuration."""
    max_line_bytes: int = DEFAULT_MAX_LINE_BYTES
    read_buffer_bytes: int = DEFAULT_READ_BUFFER_BYTES

    def __post_init__(self):
        """Validate reader configuration."""
        if self.max_line_bytes < 1024:
            raise ValueError("Maximum line size must be at least 1024 bytes")
        if self.read_buffer_bytes < 1:
            raise ValueError("Read buffer size must be positive")


@dataclass
class OutputConfig:
    """Output file configuration."""
    compress_level: int = 6
    dir_mode: int = 0o700

    def __post_init__(self):
        """Validate output configuration."""
        if not 1 <= self.compress_level <= 9:
            raise ValueError("Compression level must be between 1 and 9")
        if not 0 <= self.dir_mode <= 0o777:
            raise ValueError("Directory mode must be a permission mask between 000 and 777")


class Config:
    """
    Settings for a split run, read from the environment.

    Environment variables loaded (in order of preference):
    1. Explicit environment file passed to constructor
    2. .env.{ENVIRONMENT} in the project root
    3. .env in the project root
    4. System environment variables

    Example:
        config = Config()
        config = Config(env_file=Path("/etc/dumpsplit.env"))
    """

    def __init__(self,
                 environment: Optional[str] = None,
                 env_file: Optional[Path] = None):
        """
        Initialize settings.

        Args:
            environment: Target environment name used to pick .env.{environment}
            env_file: Explicit path to environment file
        """
        self.environment = environment or os.getenv("ENVIRONMENT", "development")
        self.project_root = self._find_project_root()

        self._load_environment_variables(env_file)

        self._load_reader_config()
        self._load_output_config()

    def _find_project_root(self) -> Path:
        """Find project root directory containing pyproject.toml or .git, else the working directory."""
        current = Path(__file__).resolve()

        for parent in current.parents:
            if any((parent / marker).exists() for marker in ['pyproject.toml', '.git']):
                return parent

        return Path.cwd()

    def _load_environment_variables(self, env_file: Path | None) -> None:
        """Load environment variables from appropriate source."""
        loaded_files = []

        if env_file:
            if env_file.exists():
                load_dotenv(env_file)
                loaded_files.append(str(env_file))
                logger.debug(f"Loaded configuration from {env_file}")
            else:
                raise ConfigurationError(f"Specified env file not found: {env_file}")

        else:
            env_specific_file = self.project_root / f".env.{self.environment}"
            if env_specific_file.exists():
                load_dotenv(env_specific_file)
                loaded_files.append(str(env_specific_file))
                logger.debug(f"Loaded environment-specific config: {env_specific_file}")

            generic_env_file = self.project_root / ".env"
            if generic_env_file.exists():
                load_dotenv(generic_env_file)
                loaded_files.append(str(generic_env_file))
                logger.debug(f"Loaded generic config: {generic_env_file}")

        self._loaded_env_files = loaded_files
        logger.debug(f"Project root: {self.project_root}")
        logger.debug(f"Loaded env files: {loaded_files}")

    def _load_reader_config(self) -> None:
        """Load input stream configuration."""
        try:
            max_line_bytes = int(os.getenv("DUMPSPLIT_MAX_LINE_BYTES", str(DEFAULT_MAX_LINE_BYTES)))
            read_buffer_bytes = int(os.getenv("DUMPSPLIT_READ_BUFFER_BYTES", str(DEFAULT_READ_BUFFER_BYTES)))
            self.reader = ReaderConfig(
                max_line_bytes=max_line_bytes,
                read_buffer_bytes=read_buffer_bytes
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid reader configuration: {e}")

    def _load_output_config(self) -> None:
        """Load output file configuration."""
        try:
            compress_level = int(os.getenv("DUMPSPLIT_COMPRESS_LEVEL", "6"))
            dir_mode = int(os.getenv("DUMPSPLIT_DIR_MODE", "700"), 8)
            self.output = OutputConfig(
                compress_level=compress_level,
                dir_mode=dir_mode
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid output configuration: {e}")

    def with_max_line_bytes(self, max_line_bytes: Optional[int]) -> "Config":
        """Apply a command-line override of the line ceiling."""
        if max_line_bytes is not None:
            try:
                self.reader = ReaderConfig(
                    max_line_bytes=max_line_bytes,
                    read_buffer_bytes=self.reader.read_buffer_bytes
                )
            except ValueError as e:
                raise ConfigurationError(f"Invalid reader configuration: {e}")
        return self

    def get_settings_summary(self) -> dict[str, Any]:
        """Settings snapshot for debug logging."""
        return {
            'environment': self.environment,
            'loaded_env_files': self._loaded_env_files,
            'max_line_bytes': self.reader.max_line_bytes,
            'read_buffer_bytes': self.reader.read_buffer_bytes,
            'compress_level': self.output.compress_level,
            'dir_mode': oct(self.output.dir_mode),
        }

    def __repr__(self) -> str:
        return (
            f"Config(environment={self.environment}, "
            f"max_line_bytes={self.reader.max_line_bytes}, "
            f"compress_level={self.output.compress_level})"
        )
