"""Custom exceptions for the OpenVPN management client."""

from typing import Optional


class ManagementError(Exception):
    """Base exception for management interface errors."""
    pass


class ConfigurationError(ManagementError):
    """Raised when the client configuration is invalid"""
    pass


class ConnectError(ManagementError):
    """Raised when the management endpoint cannot be reached"""
    pass


class AuthError(ManagementError):
    """Raised when the password challenge is missing or rejected"""
    pass


class TimeoutError(ManagementError):
    """Raised when no terminator line arrives before the deadline"""
    pass


class ProtocolError(ManagementError):
    """Raised when the stream closes mid-reply or the reply has an unexpected form"""
    pass


class ParseError(ManagementError):
    """Raised when a report or counter line is malformed"""

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line


class RemoteError(ManagementError):
    """Raised when the daemon answers ERROR: <message>"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(ManagementError, ValueError):
    """Raised when a command argument is rejected before anything is sent"""
    pass
