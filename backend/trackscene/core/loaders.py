"""Track loading: GPX/FIT files (local, uploaded or remote) -> Track.

Parsing itself is delegated to gpxpy and fitparse; this module only flattens
their output into the Track shape and pulls heart rate from the sensor
extensions where the file has them.
"""

import io
import logging
import os
import re
from typing import Optional
from urllib.parse import urlparse

import gpxpy
import gpxpy.gpx
import httpx
from fitparse import FitFile, FitParseError

from trackscene.core.config import settings
from trackscene.core.constants import SEMICIRCLES_TO_DEGREES, SUPPORTED_EXTENSIONS
from trackscene.core.derivation import check_heart_rate
from trackscene.core.errors import TrackFetchError, TrackParseError, UnsupportedFormat
from trackscene.schemas.track import Track, TrackPoint

logger = logging.getLogger(__name__)

_XML_ENCODING = re.compile(rb"""<\?xml[^>]*encoding\s*=\s*["']([A-Za-z0-9._-]+)["']""")
_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def _heart_rate_from_gpx_point(point) -> Optional[float]:
    """Read the heart rate from a gpxpy point's extensions.

    Handles the common Garmin TrackPointExtension layout:
    <extensions>
        <gpxtpx:TrackPointExtension>
            <gpxtpx:hr>76</gpxtpx:hr>
        </gpxtpx:TrackPointExtension>
    </extensions>
    """
    for extension in point.extensions or ():
        for elem in extension.iter():
            if not isinstance(elem.tag, str):
                continue
            if (elem.tag.endswith("}hr") or elem.tag == "hr") and elem.text:
                try:
                    return float(elem.text)
                except ValueError:
                    logger.warning("Ignoring non-numeric heart rate %r", elem.text)
    return None


def _build_track(name: str, points: list, hr: list) -> Track:
    # Drop the HR series entirely when no point carried a sample
    heart_rate = tuple(hr) if any(v is not None for v in hr) else None
    check_heart_rate(points, heart_rate)
    return Track(name=name, points=tuple(points), heart_rate=heart_rate)


def parse_gpx(source, name: Optional[str] = None) -> Track:
    """Parse GPX text or a file object. All tracks/segments are concatenated."""
    try:
        gpx = gpxpy.parse(source)
    except gpxpy.gpx.GPXException as e:
        raise TrackParseError(f"invalid GPX document: {e}") from e

    points: list[TrackPoint] = []
    hr: list[Optional[float]] = []
    for track in gpx.tracks:
        if name is None and track.name:
            name = track.name
        for segment in track.segments:
            for p in segment.points:
                points.append(TrackPoint(
                    longitude=p.longitude,
                    latitude=p.latitude,
                    elevation=p.elevation if p.elevation is not None else 0.0,
                ))
                hr.append(_heart_rate_from_gpx_point(p))

    return _build_track(name or "track", points, hr)


def decode_gpx(data: bytes) -> str:
    """Decode raw GPX bytes using the encoding named in the XML declaration."""
    match = _XML_ENCODING.match(data.lstrip(b"\xef\xbb\xbf \t\r\n"))
    encoding = match.group(1).decode("ascii") if match else "utf-8"
    try:
        text = data.decode("utf-8-sig" if encoding.lower() in ("utf-8", "utf8") else encoding)
    except (LookupError, UnicodeDecodeError) as e:
        raise TrackParseError(f"cannot decode GPX as {encoding}: {e}") from e
    # The declaration no longer describes the decoded text
    return _XML_DECLARATION.sub("", text, count=1)


def load_gpx(path: str) -> Track:
    stem = os.path.splitext(os.path.basename(path))[0]
    with open(path, "rb") as f:
        return parse_gpx(decode_gpx(f.read()), name=stem)


def parse_fit(fileish, name: str = "track") -> Track:
    """Build a Track from FIT `record` messages that carry a position."""
    points: list[TrackPoint] = []
    hr: list[Optional[float]] = []
    skipped = 0
    try:
        ff = FitFile(fileish)
        for record in ff.get_messages("record"):
            fields = {f.name: f.value for f in record}
            lat = fields.get("position_lat")
            lon = fields.get("position_long")
            if lat is None or lon is None:
                skipped += 1
                continue
            # Prefer enhanced fields when present
            ele = fields.get("enhanced_altitude")
            if ele is None:
                ele = fields.get("altitude")
            heart = fields.get("heart_rate")
            points.append(TrackPoint(
                longitude=lon * SEMICIRCLES_TO_DEGREES,
                latitude=lat * SEMICIRCLES_TO_DEGREES,
                elevation=float(ele) if ele is not None else 0.0,
            ))
            hr.append(float(heart) if heart is not None else None)
    except FitParseError as e:
        raise TrackParseError(f"invalid FIT file: {e}") from e

    if skipped:
        logger.warning("Skipped %d FIT records without a position", skipped)
    return _build_track(name, points, hr)


def load_fit(path: str) -> Track:
    stem = os.path.splitext(os.path.basename(path))[0]
    return parse_fit(path, name=stem)


def _extension(filename: str) -> str:
    ext = os.path.splitext(filename)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormat(f"Only .gpx or .fit files are supported, got {filename!r}")
    return ext


def load_track(path: str) -> Track:
    """Load a local .gpx or .fit file."""
    ext = _extension(path)
    track = load_gpx(path) if ext == ".gpx" else load_fit(path)
    logger.info("Loaded %s: %d points, heart rate %s",
                path, len(track.points), "yes" if track.heart_rate else "no")
    return track


def load_track_bytes(data: bytes, filename: str) -> Track:
    """Parse an uploaded file's contents; the format comes from its name."""
    ext = _extension(filename)
    stem = os.path.splitext(os.path.basename(filename))[0]
    if ext == ".gpx":
        return parse_gpx(decode_gpx(data), name=stem)
    return parse_fit(io.BytesIO(data), name=stem)


def fetch_track(url: str, timeout: Optional[float] = None) -> Track:
    """Download a track over HTTP and parse it."""
    filename = os.path.basename(urlparse(url).path) or "track.gpx"
    _extension(filename)
    try:
        with httpx.Client(timeout=timeout or settings.fetch_timeout_s, follow_redirects=True) as client:
            r = client.get(url)
            r.raise_for_status()
    except httpx.HTTPError as e:
        raise TrackFetchError(f"could not fetch {url}: {e}") from e
    logger.info("Fetched %s (%d bytes)", url, len(r.content))
    return load_track_bytes(r.content, filename)


def named_track_path(name: str) -> Optional[str]:
    """Resolve a configured track name to its file, or None if unknown/missing."""
    filename = settings.track_files.get(name)
    if filename is None:
        return None
    path = os.path.join(settings.tracks_dir, filename)
    return path if os.path.exists(path) else None
