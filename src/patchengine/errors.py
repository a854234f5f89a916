"""Exception types raised by the patch engine."""

from __future__ import annotations

from typing import Any, Mapping


class PatchEngineError(RuntimeError):
    """Base error for failures that cannot be reported as a value."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = dict(details or {})


class ConfigError(PatchEngineError):
    """Raised when an engine configuration file cannot be interpreted."""
