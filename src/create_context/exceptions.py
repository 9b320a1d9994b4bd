from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CreateContextError(Exception):
    """Base exception for errors in the create_context module."""


@dataclass(frozen=True)
class TraversalError(CreateContextError):
    """Raised when the project directory cannot be walked."""

    root: Path
    reason: str

    def __str__(self) -> str:
        return f"Cannot walk {self.root}: {self.reason}"


@dataclass(frozen=True)
class FileSizeExceededError(CreateContextError):
    """Raised when a file is larger than the configured ceiling."""

    path: Path
    size_kb: float
    limit_kb: float

    def __str__(self) -> str:
        return f"{self.path} is {self.size_kb:.2f} KB, above the {self.limit_kb:g} KB limit"


@dataclass(frozen=True)
class FileReadError(CreateContextError):
    """Raised when a file cannot be opened or decoded as text."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True)
class OutputWriteError(CreateContextError):
    """Raised when the context document cannot be written to disk."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Cannot write {self.path}: {self.reason}"


@dataclass(frozen=True)
class ConfigFileError(CreateContextError):
    """Raised when a YAML configuration file is missing or invalid."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Invalid configuration file {self.path}: {self.reason}"
