"""Track derivation: turn a loaded track into the geometry the map draws.

Every function here is pure. Inputs are validated up front and a
``TrackError`` subclass is raised before any output is built, so callers
never see a partial result.
"""

import math
from typing import Optional, Sequence, Union

from trackscene.core.constants import DEFAULT_STRIDE
from trackscene.core.errors import EmptyTrack, InvalidArgument, LengthMismatch
from trackscene.schemas.track import Endpoint, Segment, Track, TrackPoint, WallGeometry

TrackLike = Union[Track, Sequence[TrackPoint]]
HeartRate = Optional[Sequence[Optional[float]]]


def _points(track: TrackLike) -> tuple[TrackPoint, ...]:
    if isinstance(track, Track):
        return track.points
    return tuple(track)


def check_heart_rate(points: Sequence[TrackPoint], heart_rate: HeartRate) -> None:
    """Raise LengthMismatch unless heart_rate is absent or exactly aligned."""
    if heart_rate is not None and len(heart_rate) != len(points):
        raise LengthMismatch(len(points), len(heart_rate))


def _average(a: Optional[float], b: Optional[float]) -> Optional[float]:
    if a is None or b is None:
        return None
    return (a + b) / 2


def decimate_segments(
    track: TrackLike,
    heart_rate: HeartRate = None,
    stride: int = DEFAULT_STRIDE,
) -> list[Segment]:
    """Split the track into two-point segments `stride` vertices apart.

    Segments start at index 0 and stop once the right endpoint would run
    past the last point. A trailing point with no partner `stride` vertices
    ahead is left out, so with stride 2 an even-length track never uses its
    last point. Each segment keeps the index of its left endpoint as ``id``
    and carries the mean of the two endpoint heart rates (None when either
    endpoint has no heart-rate sample).
    """
    if stride <= 0:
        raise InvalidArgument(f"stride must be >= 1, got {stride}")
    points = _points(track)
    check_heart_rate(points, heart_rate)

    segments = []
    for i in range(0, len(points) - stride, stride):
        j = i + stride
        avg = _average(heart_rate[i], heart_rate[j]) if heart_rate is not None else None
        segments.append(Segment(id=i, start=points[i], end=points[j], avg_heart_rate=avg))
    return segments


def extract_endpoints(track: TrackLike) -> tuple[Endpoint, Endpoint]:
    """Return (start, end). A single-point track yields the same point twice."""
    points = _points(track)
    if not points:
        raise EmptyTrack("cannot take endpoints of an empty track")
    return (
        Endpoint(kind="start", point=points[0]),
        Endpoint(kind="end", point=points[-1]),
    )


def build_wall_geometry(track: TrackLike, height: float) -> WallGeometry:
    """Ribbon anchored at the track: bottom edge is each point lowered by height."""
    if not (math.isfinite(height) and height > 0):
        raise InvalidArgument(f"wall height must be a finite value > 0, got {height}")
    top = _points(track)
    bottom = tuple(
        TrackPoint(
            longitude=p.longitude,
            latitude=p.latitude,
            elevation=p.elevation - height,
        )
        for p in top
    )
    return WallGeometry(height=height, top=top, bottom=bottom)


def full_path(track: TrackLike) -> list[list[float]]:
    return [p.as_coordinate() for p in _points(track)]
