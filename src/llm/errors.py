"""Errors raised by the model layer."""

from typing import Optional


class ModelInvocationError(Exception):
    """A model provider call failed (network, timeout, status, unconfigured)."""

    def __init__(
        self,
        message: str,
        role: Optional[str] = None,
        model: Optional[str] = None,
        status_code: int = None,
    ):
        super().__init__(message)
        self.role = role
        self.model = model
        self.status_code = status_code


class ParseError(Exception):
    """Model output was not valid JSON or did not match the expected shape."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw
