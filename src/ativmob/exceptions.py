"""Custom exception hierarchy for ativmob."""

from __future__ import annotations


class AtivMobError(Exception):
    """Base exception for all ativmob errors."""


class AtivMobConfigError(AtivMobError):
    """Invalid or missing configuration."""


class LocationError(AtivMobError):
    """A single-shot position request did not produce a coordinate."""


class LocationPermissionDeniedError(LocationError):
    """Neither fine nor coarse location permission is granted."""


class LocationUnavailableError(LocationError):
    """The platform provider answered without a position (disabled or no fix)."""


class LocationTimeoutError(LocationError):
    """The platform provider did not answer within the configured timeout."""


class LocationUnknownError(LocationError):
    """The platform provider failed with an unclassified cause.

    The original exception is available as ``cause`` (and ``__cause__``).
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class RemoteListError(AtivMobError):
    """Fetching or decoding the remote list failed."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class TransportError(RemoteListError):
    """Network-level failure (connection refused, DNS, timeout)."""


class HttpStatusError(RemoteListError):
    """The endpoint answered with a non-2xx status."""

    def __init__(self, message: str, *, status: int, url: str = "") -> None:
        self.status = status
        super().__init__(message, url=url)


class DecodeError(RemoteListError):
    """The response body is not a JSON array of well-formed records."""


class PreferenceError(AtivMobError):
    """The preference store could not be read or written."""
