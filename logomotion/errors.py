"""Exceptions raised while gating the session and calling the Gemini API."""

from typing import Optional


class LogoMotionError(Exception):
    """Base class for every failure the workspace knows how to report."""


class CredentialMissing(LogoMotionError):
    """No API key is available at call time."""


class GateCheckFailure(LogoMotionError):
    """The host key capability raised while being checked or opened."""


class NoImageData(LogoMotionError):
    """The image response was well-formed but carried no inline image part."""


class NoVideoURI(LogoMotionError):
    """The video operation completed without a usable video reference."""


class PollTimeout(LogoMotionError):
    """The video operation did not finish within the allowed polls."""

    def __init__(self, message: str, operation_name: str = "", attempts: int = 0):
        super().__init__(message)
        self.operation_name = operation_name
        self.attempts = attempts


class RemoteCallFailure(LogoMotionError):
    """Transport or API-level error from either generation call."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
