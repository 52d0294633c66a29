"""
Configuration module for the dump splitter.
"""

from .settings import (
    Config,
    ConfigurationError,
    OutputConfig,
    ReaderConfig,
)

__all__ = [
    'Config',
    'ConfigurationError',
    'OutputConfig',
    'ReaderConfig',
]
