"""Validation errors raised while loading or deriving tracks.

All of them subclass ``ValueError`` so callers that only care about "bad
input" can catch that; the API maps each kind to an HTTP status.
"""


class TrackError(ValueError):
    """Base class for track loading/derivation failures."""


class EmptyTrack(TrackError):
    """A track with zero points where at least one is required."""


class InvalidArgument(TrackError):
    """Non-positive stride, height or sampling step."""


class LengthMismatch(TrackError):
    """Heart-rate series present but not aligned with the coordinates."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"heart rate series has {actual} samples, track has {expected} points"
        )


class UnsupportedFormat(TrackError):
    """File extension is neither .gpx nor .fit."""


class TrackParseError(TrackError):
    """gpxpy/fitparse rejected the file contents."""


class TrackFetchError(TrackError):
    """Remote track could not be downloaded."""
