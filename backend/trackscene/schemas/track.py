from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from trackscene.core.errors import LengthMismatch


class RenderMode(str, Enum):
    simple = "simple"
    wall_projection = "wall_projection"


class TrackPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    longitude: float
    latitude: float
    elevation: float = 0.0

    def as_coordinate(self) -> list[float]:
        """GeoJSON position: [lon, lat, ele]."""
        return [self.longitude, self.latitude, self.elevation]


class Track(BaseModel):
    """A loaded route: ordered points plus an optional parallel HR series."""

    model_config = ConfigDict(frozen=True)

    name: str = "track"
    points: tuple[TrackPoint, ...]
    # Same length as points; None entries are points without a sensor sample
    heart_rate: Optional[tuple[Optional[float], ...]] = None

    @model_validator(mode="after")
    def _heart_rate_aligned(self):
        if self.heart_rate is not None and len(self.heart_rate) != len(self.points):
            raise LengthMismatch(len(self.points), len(self.heart_rate))
        return self


class Segment(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int  # index of the left endpoint in the source track
    start: TrackPoint
    end: TrackPoint
    avg_heart_rate: Optional[float] = None


class Endpoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["start", "end"]
    point: TrackPoint


class WallGeometry(BaseModel):
    """Vertical ribbon hanging below the track (top edge = the track)."""

    model_config = ConfigDict(frozen=True)

    height: float
    top: tuple[TrackPoint, ...]
    bottom: tuple[TrackPoint, ...]


class Bounds(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float


class ProfileSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_m: float
    elevation_m: float


class TrackSummary(BaseModel):
    points_count: int
    distance_m: float
    elev_gain_m: float
    elev_loss_m: float
    avg_heart_rate: Optional[float] = None
    max_heart_rate: Optional[float] = None


class Scene(BaseModel):
    """Everything the map client needs to draw one track.

    Layer fields are GeoJSON dicts so the client can hand them straight to
    its mapping SDK.
    """

    name: str
    render_mode: RenderMode
    path: dict[str, Any]
    segments: dict[str, Any]
    endpoints: dict[str, Any]
    wall: Optional[dict[str, Any]] = None
    bounds: Bounds
    profile: list[ProfileSample]
    summary: TrackSummary


class TrackListing(BaseModel):
    name: str
    filename: str
