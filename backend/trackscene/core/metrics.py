import math
from typing import Optional, Sequence

from trackscene.core.constants import DEFAULT_PROFILE_STEP_M, EARTH_RADIUS_M, MAX_PROFILE_SAMPLES
from trackscene.core.errors import EmptyTrack, InvalidArgument
from trackscene.schemas.track import Bounds, ProfileSample, Track, TrackSummary


def haversine(lat1, lon1, lat2, lon2):
    """Return great‑circle distance in meters between two WGS84 points.

    Uses the standard haversine formula; sufficient for per‑point distances
    over a typical GPS activity track.
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def compute_bounds(track: Track) -> Bounds:
    if not track.points:
        raise EmptyTrack("cannot compute bounds of an empty track")
    lats = [p.latitude for p in track.points]
    lons = [p.longitude for p in track.points]
    return Bounds(
        min_lat=min(lats),
        min_lon=min(lons),
        max_lat=max(lats),
        max_lon=max(lons),
    )


def elevation_profile(track: Track, step_m: float = DEFAULT_PROFILE_STEP_M) -> list[ProfileSample]:
    """Distance-indexed elevation series for the profile chart.

    One sample at the start, one each time the running distance crosses a
    multiple of `step_m`, and one at the last point. Steps that would
    produce more than MAX_PROFILE_SAMPLES samples are rejected.
    """
    if not (math.isfinite(step_m) and step_m > 0):
        raise InvalidArgument(f"profile step must be a finite value > 0, got {step_m}")
    points = track.points
    if not points:
        return []

    legs = [haversine(a.latitude, a.longitude, b.latitude, b.longitude) for a, b in zip(points, points[1:])]
    total_m = sum(legs)
    if total_m / step_m > MAX_PROFILE_SAMPLES:
        raise InvalidArgument(
            f"profile step {step_m} m is too small for a {total_m:.0f} m track "
            f"(limit {MAX_PROFILE_SAMPLES} samples)"
        )

    samples = [ProfileSample(distance_m=0.0, elevation_m=points[0].elevation)]
    cumulative_m = 0.0
    next_sample_m = step_m
    for b, leg_m in zip(points[1:], legs):
        cumulative_m += leg_m
        while cumulative_m >= next_sample_m:
            samples.append(ProfileSample(distance_m=next_sample_m, elevation_m=b.elevation))
            next_sample_m += step_m

    if cumulative_m > samples[-1].distance_m:
        samples.append(ProfileSample(distance_m=cumulative_m, elevation_m=points[-1].elevation))
    return samples


def _valid(values: Optional[Sequence[Optional[float]]]) -> list[float]:
    return [v for v in (values or ()) if v is not None]


def summarize(track: Track) -> TrackSummary:
    total_m = 0.0
    elev_gain = 0.0
    elev_loss = 0.0
    for a, b in zip(track.points, track.points[1:]):
        total_m += haversine(a.latitude, a.longitude, b.latitude, b.longitude)
        de = b.elevation - a.elevation
        if de > 0:
            elev_gain += de
        else:
            elev_loss += -de

    hr = _valid(track.heart_rate)
    return TrackSummary(
        points_count=len(track.points),
        distance_m=total_m,
        elev_gain_m=elev_gain,
        elev_loss_m=elev_loss,
        avg_heart_rate=sum(hr) / len(hr) if hr else None,
        max_heart_rate=max(hr) if hr else None,
    )
