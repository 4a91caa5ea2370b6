"""Scene builder: runs the derivation pipeline and packages GeoJSON layers.

Main entry point is ``build_scene``; the per-layer helpers are exposed for the
export script and tests.
"""

import logging
from typing import Optional

from trackscene.core import derivation, metrics
from trackscene.core.config import settings
from trackscene.schemas.track import (
    Endpoint,
    RenderMode,
    Scene,
    Segment,
    Track,
    WallGeometry,
)

logger = logging.getLogger(__name__)


def path_feature(track: Track) -> dict:
    return {
        "type": "Feature",
        "geometry": {
            "type": "LineString",
            "coordinates": derivation.full_path(track),
        },
        "properties": {"name": track.name, "points_count": len(track.points)},
    }


def segments_collection(segments: list[Segment]) -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": s.id,
                "geometry": {
                    "type": "LineString",
                    "coordinates": [s.start.as_coordinate(), s.end.as_coordinate()],
                },
                "properties": {"heart_rate": s.avg_heart_rate},
            }
            for s in segments
        ],
    }


def endpoints_collection(endpoints: tuple[Endpoint, Endpoint]) -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": object_id,
                "geometry": {"type": "Point", "coordinates": e.point.as_coordinate()},
                "properties": {"type": e.kind},
            }
            for object_id, e in enumerate(endpoints, start=1)
        ],
    }


def wall_feature(wall: WallGeometry) -> dict:
    """Wall as a single polygon: along the top edge, back along the bottom.

    A one-point track has no area to enclose; its wall is the vertical
    LineString from the point down to the bottom edge.
    """
    if len(wall.top) < 2:
        coords = [p.as_coordinate() for p in wall.top + wall.bottom]
        return {
            "type": "Feature",
            "geometry": {"type": "LineString", "coordinates": coords},
            "properties": {"height": wall.height},
        }
    top = [p.as_coordinate() for p in wall.top]
    bottom = [p.as_coordinate() for p in reversed(wall.bottom)]
    ring = top + bottom + top[:1]
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": [ring]},
        "properties": {"height": wall.height},
    }


def build_scene(
    track: Track,
    render_mode: RenderMode = RenderMode.simple,
    stride: Optional[int] = None,
    wall_height: Optional[float] = None,
    profile_step_m: Optional[float] = None,
) -> Scene:
    """Derive every layer for one track.

    The wall is only built in wall-projection mode. Segments are always
    built; without heart-rate data they carry geometry only, and the layer
    is left empty so the client falls back to the plain path.

    Raises:
        EmptyTrack, InvalidArgument, LengthMismatch: on bad input; nothing
        is returned in that case.
    """
    stride = settings.default_stride if stride is None else stride
    wall_height = settings.wall_height_m if wall_height is None else wall_height
    profile_step_m = settings.profile_step_m if profile_step_m is None else profile_step_m

    endpoints = derivation.extract_endpoints(track)
    segments = derivation.decimate_segments(track, track.heart_rate, stride)
    wall = None
    if render_mode == RenderMode.wall_projection:
        wall = wall_feature(derivation.build_wall_geometry(track, wall_height))

    scene = Scene(
        name=track.name,
        render_mode=render_mode,
        path=path_feature(track),
        segments=segments_collection(segments if track.heart_rate is not None else []),
        endpoints=endpoints_collection(endpoints),
        wall=wall,
        bounds=metrics.compute_bounds(track),
        profile=metrics.elevation_profile(track, profile_step_m),
        summary=metrics.summarize(track),
    )
    logger.info(
        "Built scene %s (%s): %d points, %d segments",
        track.name, render_mode.value, len(track.points), len(scene.segments["features"]),
    )
    return scene
