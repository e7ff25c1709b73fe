"""Exception hierarchy for tileplot.

Validation problems are detected before any network access and are
reported as :class:`ValidationError` subclasses. Problems getting or
reading the map image are :class:`FetchError` subclasses, split so that
callers can tell an unreachable server (:class:`DownloadError`) from a
server that answered with something that is not a usable image
(:class:`DecodeError`).
"""


class TilePlotError(Exception):
    """Base class for all tileplot errors."""


class ValidationError(TilePlotError, ValueError):
    """An argument failed its precondition check."""

    def __init__(self, message, argument=None):
        super().__init__(message)
        self.argument = argument


class OutOfRangeError(ValidationError):
    """A zoom level has no tabulated scale."""


class UnsupportedFormatError(ValidationError):
    """The requested image format is not supported."""


class FetchError(TilePlotError):
    """Getting the map image failed."""


class DownloadError(FetchError):
    """The HTTP request failed (transport error, timeout or bad status)."""


class DecodeError(FetchError):
    """The response body is not a valid image of the expected kind."""
