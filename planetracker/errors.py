"""
Exception hierarchy for PlaneTracker.

Cycle-level failures (FetchError and subclasses) are raised by the OpenSky
client and surfaced once per refresh cycle. RowRejected is raised for a
single unusable state vector and never escapes the parser.
"""

from typing import Optional


class PlaneTrackerError(Exception):
    """Base class for all PlaneTracker errors."""


class FetchError(PlaneTrackerError):
    """A single fetch from the upstream feed failed."""


class NetworkError(FetchError):
    """Transport failure, timeout, or non-success HTTP status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(FetchError):
    """Payload could not be decoded into the expected structure."""


class RowRejected(PlaneTrackerError):
    """One state vector is too short or lacks a usable identity/position."""
