"""
Error hierarchy.

Gameplay operations report invalid input through return values; exceptions
are reserved for misconfiguration and for corrupt persisted state.
"""

from typing import Any, Optional

__all__ = [
    "GomokuError",
    "ConfigurationError",
    "CorruptSnapshotError",
]


class GomokuError(Exception):
    """Base exception for all engine errors.

    Attributes:
        code: machine-readable error code
        message: human-readable description
        context: extra detail for debugging
    """
    code: str = "GOMOKU_ERROR"

    def __init__(self, message: str = "", *, context: Optional[dict[str, Any]] = None):
        self.message = message or self.__class__.__doc__ or self.code
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({details})"
        return f"[{self.code}] {self.message}"


class ConfigurationError(GomokuError):
    """Invalid engine configuration."""
    code = "CONFIGURATION_ERROR"


class CorruptSnapshotError(GomokuError):
    """Serialized session state is malformed or inconsistent."""
    code = "CORRUPT_SNAPSHOT"
