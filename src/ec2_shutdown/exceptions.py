"""Custom exceptions for EC2 Shutdown Manager.

Defines exception hierarchy for configuration, argument and EC2 API errors.
"""

from __future__ import annotations

from typing import Any, Sequence


class ShutdownError(Exception):
    """Base exception for all shutdown manager errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error_code: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(ShutdownError):
    """Raised when configuration is missing or invalid."""

    def __init__(self, message: str, config_key: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


class ArgumentError(ShutdownError):
    """Raised when strict argument validation rejects the invocation."""

    def __init__(self, message: str, issues: Sequence[Any] = (), **kwargs):
        super().__init__(message, **kwargs)
        self.issues = tuple(issues)
        self.details["issues"] = [str(issue) for issue in self.issues]


class InstanceApiError(ShutdownError):
    """Raised when an EC2 API operation fails."""

    def __init__(self, message: str, operation: str, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.details["operation"] = operation


class DescribeError(InstanceApiError):
    """Raised when instances cannot be described."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, operation="DescribeInstances", **kwargs)


class StopInstancesError(InstanceApiError):
    """Raised when the stop request fails."""

    def __init__(self, message: str, instance_ids: Sequence[str] = (), **kwargs):
        super().__init__(message, operation="StopInstances", **kwargs)
        self.instance_ids = list(instance_ids)
        self.details["instance_ids"] = self.instance_ids
