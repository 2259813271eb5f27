"""Custom exception hierarchy for pyremootio."""

from __future__ import annotations


class RemootioError(Exception):
    """Base exception for all pyremootio errors."""


class RemootioConfigError(RemootioError):
    """Invalid or missing configuration."""

    def __init__(
        self,
        message: str,
        *,
        missing: tuple[str, ...] = (),
        invalid: tuple[str, ...] = (),
    ) -> None:
        self.missing = missing
        self.invalid = invalid
        super().__init__(message)


class RemootioStateError(RemootioError):
    """A door-state request could not be served."""


class NoValueAvailableError(RemootioStateError):
    """No door state has been observed yet."""


class NotConnectedError(RemootioStateError):
    """A command was attempted while the device is not connected and authenticated."""


class InvalidValueError(RemootioStateError, ValueError):
    """A set-request carried a missing or malformed value."""
