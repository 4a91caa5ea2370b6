import pytest

from trackscene.core.errors import EmptyTrack, InvalidArgument
from trackscene.core.scene import build_scene, wall_feature
from trackscene.core.derivation import build_wall_geometry
from trackscene.schemas.track import RenderMode, Track, TrackPoint


def sample_track(n=7, heart_rate=True):
    points = tuple(
        TrackPoint(longitude=8.0 + i * 0.001, latitude=47.0, elevation=1000.0 + 10 * i)
        for i in range(n)
    )
    hr = tuple(float(120 + i) for i in range(n)) if heart_rate else None
    return Track(name="sample", points=points, heart_rate=hr)


def test_simple_scene():
    scene = build_scene(sample_track(), RenderMode.simple, stride=2)
    assert scene.wall is None
    assert scene.path["geometry"]["type"] == "LineString"
    assert len(scene.path["geometry"]["coordinates"]) == 7
    features = scene.segments["features"]
    assert [f["id"] for f in features] == [0, 2, 4]
    assert features[0]["properties"]["heart_rate"] == 121.0
    kinds = [f["properties"]["type"] for f in scene.endpoints["features"]]
    assert kinds == ["start", "end"]
    track = sample_track()
    assert scene.endpoints["features"][1]["geometry"]["coordinates"] == track.points[-1].as_coordinate()
    assert scene.summary.points_count == 7


def test_wall_projection_scene():
    track = sample_track(3)
    scene = build_scene(track, RenderMode.wall_projection, wall_height=100)
    ring = scene.wall["geometry"]["coordinates"][0]
    assert ring[:3] == [p.as_coordinate() for p in track.points]
    assert [c[2] for c in ring[3:6]] == [920.0, 910.0, 900.0]
    assert ring[-1] == ring[0]
    assert scene.wall["properties"]["height"] == 100


def test_no_heart_rate_leaves_segments_empty():
    scene = build_scene(sample_track(heart_rate=False))
    assert scene.segments["features"] == []
    assert scene.summary.avg_heart_rate is None


def test_scene_errors():
    with pytest.raises(EmptyTrack):
        build_scene(Track(points=()))
    with pytest.raises(InvalidArgument):
        build_scene(sample_track(), stride=0)
    with pytest.raises(InvalidArgument):
        build_scene(sample_track(), RenderMode.wall_projection, wall_height=-1)


def test_wall_feature_ring_is_closed():
    points = sample_track(4).points
    feature = wall_feature(build_wall_geometry(points, 50))
    ring = feature["geometry"]["coordinates"][0]
    assert len(ring) == 2 * len(points) + 1
    assert ring[-1] == ring[0]


def test_single_point_wall_is_a_vertical_line():
    track = sample_track(1)
    scene = build_scene(track, RenderMode.wall_projection, wall_height=100)
    geometry = scene.wall["geometry"]
    assert geometry["type"] == "LineString"
    assert geometry["coordinates"] == [[8.0, 47.0, 1000.0], [8.0, 47.0, 900.0]]
