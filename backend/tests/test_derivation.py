import pytest
from pydantic import ValidationError

from trackscene.core.derivation import (
    build_wall_geometry,
    decimate_segments,
    extract_endpoints,
    full_path,
)
from trackscene.core.errors import EmptyTrack, InvalidArgument, LengthMismatch
from trackscene.schemas.track import Track, TrackPoint


def make_points(n):
    return [TrackPoint(longitude=8.0 + i * 0.001, latitude=47.0, elevation=400.0 + i) for i in range(n)]


def test_seven_points_give_three_segments():
    points = make_points(7)
    segs = decimate_segments(points, None, 2)
    assert [s.id for s in segs] == [0, 2, 4]
    assert segs[0].start == points[0] and segs[0].end == points[2]
    assert segs[-1].end == points[6]
    assert all(s.avg_heart_rate is None for s in segs)


@pytest.mark.parametrize("n", [2, 3, 4, 5, 8, 11])
def test_segment_count_is_floor_half(n):
    assert len(decimate_segments(make_points(n), None, 2)) == (n - 1) // 2


def test_trailing_point_without_pair_is_dropped():
    points = make_points(5)
    segs = decimate_segments(points, None, 2)
    assert [s.id for s in segs] == [0, 2]
    assert segs[-1].end == points[4]

    points = make_points(6)
    segs = decimate_segments(points, None, 2)
    assert [s.id for s in segs] == [0, 2]
    assert segs[-1].end == points[4]  # index 5 has no partner


def test_average_heart_rate():
    points = make_points(7)
    hr = [110, 120, 130, 141, 150, 161, 170]
    segs = decimate_segments(points, hr, 2)
    for s in segs:
        assert s.avg_heart_rate == (hr[s.id] + hr[s.id + 2]) / 2
    assert segs[1].avg_heart_rate == 140.0


def test_missing_sample_gives_no_average():
    segs = decimate_segments(make_points(5), [100, 101, None, 103, 104], 2)
    assert segs[0].avg_heart_rate is None
    assert segs[1].avg_heart_rate is None
    segs = decimate_segments(make_points(5), [100, None, 120, None, 140], 2)
    assert [s.avg_heart_rate for s in segs] == [110.0, 130.0]


def test_stride_one_and_three():
    points = make_points(7)
    assert [s.id for s in decimate_segments(points, None, 1)] == [0, 1, 2, 3, 4, 5]
    assert [s.id for s in decimate_segments(points, None, 3)] == [0, 3]


def test_single_point_has_no_segments():
    assert decimate_segments(make_points(1), None, 2) == []
    assert decimate_segments([], None, 2) == []


@pytest.mark.parametrize("stride", [0, -2])
def test_non_positive_stride(stride):
    with pytest.raises(InvalidArgument):
        decimate_segments(make_points(4), None, stride)


def test_heart_rate_length_mismatch():
    with pytest.raises(LengthMismatch) as exc:
        decimate_segments(make_points(5), [100, 110, 120, 130], 2)
    assert exc.value.expected == 5
    assert exc.value.actual == 4


def test_accepts_track_model():
    points = make_points(5)
    track = Track(name="t", points=tuple(points), heart_rate=(1, 2, 3, 4, 5))
    segs = decimate_segments(track, track.heart_rate)
    assert [s.avg_heart_rate for s in segs] == [2.0, 4.0]


def test_endpoints():
    points = make_points(5)
    start, end = extract_endpoints(points)
    assert start.kind == "start" and start.point == points[0]
    assert end.kind == "end" and end.point == points[4]


def test_endpoints_single_point():
    points = make_points(1)
    start, end = extract_endpoints(points)
    assert start.point == end.point == points[0]


def test_endpoints_empty():
    with pytest.raises(EmptyTrack):
        extract_endpoints([])


def test_wall_geometry():
    points = make_points(3)
    wall = build_wall_geometry(points, 100)
    assert list(wall.top) == points
    for top, bottom in zip(wall.top, wall.bottom):
        assert bottom.longitude == top.longitude
        assert bottom.latitude == top.latitude
        assert bottom.elevation == top.elevation - 100
    # input untouched
    assert points[0].elevation == 400.0


@pytest.mark.parametrize("height", [0, -5.0])
def test_wall_requires_positive_height(height):
    with pytest.raises(InvalidArgument):
        build_wall_geometry(make_points(3), height)


def test_full_path():
    points = make_points(3)
    assert full_path(points) == [[p.longitude, p.latitude, p.elevation] for p in points]


@pytest.mark.parametrize("height", [float("nan"), float("inf")])
def test_wall_rejects_non_finite_height(height):
    with pytest.raises(InvalidArgument):
        build_wall_geometry(make_points(3), height)


def test_track_rejects_misaligned_heart_rate():
    with pytest.raises(ValidationError):
        Track(name="t", points=tuple(make_points(3)), heart_rate=(100, 110))
