"""
Configuration data models for fsfind.

This module defines the settings that surround a query: the default search
path, logging verbosity and output formatting of the command-line tool.
"""

from typing import Any, Dict, List
from pathlib import Path
from enum import Enum
import logging
from pydantic import BaseModel, Field, field_validator


class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LoggingConfig(BaseModel):
    """
    Configuration for diagnostic logging.

    Attributes:
        level: Minimum level of emitted log records
        format: Format string of the stderr handler
    """

    level: LogLevel = Field(LogLevel.WARNING, description="Logging level")
    format: str = Field("fsfind: %(message)s", min_length=1, description="Log record format")

    @field_validator('level', mode='before')
    @classmethod
    def validate_level(cls, v) -> LogLevel:
        """Validate and convert level to enum, case-insensitively."""
        if isinstance(v, str):
            try:
                return LogLevel(v.upper())
            except ValueError:
                raise ValueError(f"Invalid logging level: {v}")
        return v

    def get_level_number(self) -> int:
        return getattr(logging, self.level.value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data = self.model_dump()
        data['level'] = self.level.value
        return data


class OutputConfig(BaseModel):
    """
    Configuration for printing matches.

    Attributes:
        null_separator: Separate paths with NUL instead of newline
        sort: Sort paths after collection instead of streaming them
    """

    null_separator: bool = Field(False, description="Separate output with NUL")
    sort: bool = Field(False, description="Sort paths before printing")

    def get_separator(self) -> str:
        return "\0" if self.null_separator else "\n"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class FindConfig(BaseModel):
    """
    Main configuration class for fsfind.

    Attributes:
        search_path: Root path used when none is given on the command line
        logging: Logging configuration
        output: Output configuration
    """

    search_path: str = Field(".", min_length=1, description="Default root path")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output configuration")

    @field_validator('search_path')
    @classmethod
    def validate_search_path(cls, v: str) -> str:
        """Expand user paths but keep relative paths relative."""
        v = v.strip()
        if not v:
            raise ValueError("Search path cannot be empty")
        if v.startswith('~'):
            return str(Path(v).expanduser())
        return v

    def validate_configuration(self) -> List[str]:
        """
        Check the configuration for non-fatal problems.

        Returns:
            List of warning messages
        """
        warnings = []
        path = Path(self.search_path)
        if not path.exists():
            warnings.append(f"Default search path does not exist: {self.search_path}")
        elif not path.is_dir():
            warnings.append(f"Default search path is not a directory: {self.search_path}")
        if self.logging.level is LogLevel.ERROR:
            warnings.append("Logging level ERROR suppresses traversal diagnostics")
        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {
            'search_path': self.search_path,
            'logging': self.logging.to_dict(),
            'output': self.output.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FindConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        parts = [f"Search path: {self.search_path}"]
        parts.append(f"Log level: {self.logging.level.value}")
        parts.append(f"Sort: {self.output.sort}")
        return " | ".join(parts)
