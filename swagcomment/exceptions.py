"""
Custom exception types for swagcomment.

This module defines a hierarchy of exceptions used throughout the codebase.
Using specific exception types enables:
- Per-file and per-handler recovery with targeted except blocks
- Better error messages and debugging
- A clear line between recoverable and terminal failures
"""

from __future__ import annotations

from typing import Any


class SwagCommentError(Exception):
    """Base exception for all swagcomment errors.

    All custom exceptions in swagcomment inherit from this class
    to enable catching all tool-specific errors with a single handler.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(SwagCommentError):
    """Raised when generator configuration is invalid or cannot be loaded."""

    pass


# ============================================================================
# Source Errors
# ============================================================================


class SourceError(SwagCommentError):
    """Base exception for errors reading or parsing Go sources."""

    def __init__(self, path: str, reason: str, message: str | None = None):
        super().__init__(message or f"{path}: {reason}", {"path": path, "reason": reason})
        self.path = path
        self.reason = reason


class GoParseError(SourceError):
    """Raised when a Go source file cannot be read or contains syntax errors."""

    def __init__(self, path: str, reason: str):
        super().__init__(path, reason, f"Failed to parse {path}: {reason}")


class RouterUnreadableError(SourceError):
    """Raised when the router file cannot be opened."""

    def __init__(self, path: str, reason: str):
        super().__init__(path, reason, f"Could not read router file {path}: {reason}")


class TypeSourceUnreadableError(SourceError):
    """Raised when a request-type source file cannot be loaded."""

    def __init__(self, path: str, reason: str):
        super().__init__(path, reason, f"Could not load type source {path}: {reason}")


# ============================================================================
# Rewrite Errors
# ============================================================================


class SpliceError(SwagCommentError):
    """Raised when a doc comment cannot be written into a handler file.

    The target file is left untouched when this is raised.
    """

    def __init__(self, path: str, handler: str, reason: str):
        super().__init__(
            f"Failed to update comment for {handler} in {path}: {reason}",
            {"path": path, "handler": handler, "reason": reason},
        )
        self.path = path
        self.handler = handler
        self.reason = reason


# ============================================================================
# Discovery Errors (terminal)
# ============================================================================


class DiscoveryError(SwagCommentError):
    """Base exception for failures that abort the whole run."""

    pass


class HandlerDirectoryNotFoundError(DiscoveryError):
    """Raised when the handler directory does not exist."""

    def __init__(self, handler_dir: str):
        super().__init__(
            f"Directory {handler_dir} does not exist", {"handler_dir": handler_dir}
        )
        self.handler_dir = handler_dir


class NoHandlersFoundError(DiscoveryError):
    """Raised when no handler files match the configured pattern."""

    def __init__(self, handler_dir: str, pattern: str):
        super().__init__(
            f"No handler files found in {handler_dir} matching pattern {pattern}",
            {"handler_dir": handler_dir, "pattern": pattern},
        )
        self.handler_dir = handler_dir
        self.pattern = pattern


__all__ = [
    "SwagCommentError",
    "ConfigurationError",
    "SourceError",
    "GoParseError",
    "RouterUnreadableError",
    "TypeSourceUnreadableError",
    "SpliceError",
    "DiscoveryError",
    "HandlerDirectoryNotFoundError",
    "NoHandlersFoundError",
]
