"""Error taxonomy shared by the gateway, the session and the HTTP layer."""

from __future__ import annotations


class NamerError(Exception):
    """Base class for errors the session reports to the user."""


class ConfigurationError(NamerError):
    """Raised when a required setting (e.g. the gateway credential) is missing."""


class ProtocolError(NamerError):
    """Raised when a turn sequence cannot be sent to the gateway as-is."""


class GatewayError(NamerError):
    """Non-2xx response from the model gateway."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
