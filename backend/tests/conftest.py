import os

import pytest

from trackscene.core.config import settings

TRACKS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "tracks")


def gpx_document(points, name="Test track"):
    """Build a GPX string from (lat, lon, ele, hr) tuples; hr may be None."""
    rows = []
    for lat, lon, ele, hr in points:
        ext = ""
        if hr is not None:
            ext = (
                "<extensions><gpxtpx:TrackPointExtension>"
                f"<gpxtpx:hr>{hr}</gpxtpx:hr>"
                "</gpxtpx:TrackPointExtension></extensions>"
            )
        rows.append(f'<trkpt lat="{lat}" lon="{lon}"><ele>{ele}</ele>{ext}</trkpt>')
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1" '
        'xmlns:gpxtpx="http://www.garmin.com/xmlschemas/TrackPointExtension/v1">'
        f"<trk><name>{name}</name><trkseg>{''.join(rows)}</trkseg></trk></gpx>"
    )


@pytest.fixture(autouse=True)
def bundled_tracks(monkeypatch):
    monkeypatch.setattr(settings, "tracks_dir", TRACKS_DIR)
