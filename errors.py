"""Error types raised by the proxy loader."""
from __future__ import annotations

import traceback
from typing import Optional


class ProxyLoaderError(Exception):
    """Base type for loader failures."""


class ConfigError(ProxyLoaderError):
    """Raised when the loader configuration cannot be read or validated."""


class LocationNotFoundError(ProxyLoaderError):
    """Raised when a configured location is missing or is not a directory."""

    def __init__(self, location: str) -> None:
        super().__init__(f"plugin location not found: {location}")
        self.location = location


class LoadClassError(ProxyLoaderError):
    """Raised when a script fails while being parsed or initialised.

    Wraps SyntaxError, ImportError and NotImplementedError so the load pass
    can tell them apart from failures it must not recover from.
    """

    def __init__(self, path: str, cause: Optional[BaseException] = None, message: Optional[str] = None) -> None:
        if message is None:
            message = f"{type(cause).__name__}: {cause}" if cause is not None else "load failed"
        super().__init__(message)
        self.path = path
        self.cause = cause
        self.message = message

    @property
    def trace(self) -> str:
        if self.cause is None:
            return ""
        return "".join(traceback.format_exception(type(self.cause), self.cause, self.cause.__traceback__))


class RegistryError(ProxyLoaderError):
    """Raised when the settings registry cannot be read or written."""
