from __future__ import annotations

from typing import Optional


class WebAuthnOptionsError(ValueError):
    """Base exception for errors raised while building creation options."""


class MalformedEncoding(WebAuthnOptionsError):
    """Text could not be decoded as canonical unpadded base64url."""


class InvalidEntity(WebAuthnOptionsError):
    """A required entity field is missing, empty or of the wrong kind."""

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Invalid value for {field!r}")
        self.field = field


class ValidationError(WebAuthnOptionsError):
    """A precondition of options assembly was not met."""

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Invalid value for {field!r}")
        self.field = field
