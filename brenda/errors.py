"""
Error taxonomy for the Brenda backend and transport client.

Every failure the services report upward is one of these classes. The
backend turns them into JSON responses of the form ``{"error": message, ...}``
through a single exception handler; the transport client surfaces them as
error events.
"""

from typing import Any, Dict


class BrendaError(Exception):
    """Base error carrying an HTTP status and extra response detail."""

    status_code = 500

    def __init__(self, message: str, **detail: Any):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message, **self.detail}


class ValidationFailure(BrendaError):
    """Bad or missing input."""

    status_code = 400


class AuthFailure(BrendaError):
    """Bad or expired session token. The caller must mint a new one."""

    status_code = 401


class ConfigurationError(BrendaError):
    """A required server secret is not configured."""

    status_code = 500


class UpstreamError(BrendaError):
    """The provider rejected or failed a session request."""

    status_code = 502


class RelayError(BrendaError):
    """The chat relay could not obtain a reply from the provider."""

    status_code = 500


class TransportError(BrendaError):
    """Client-side network or peer connection failure."""


class MicrophoneUnavailable(TransportError):
    """Microphone capture could not be started (e.g. permission denied)."""


class BackendRequestError(TransportError):
    """A call from the client to the Brenda backend failed."""
