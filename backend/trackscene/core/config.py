from pydantic_settings import BaseSettings
from pydantic import field_validator
from trackscene.core.constants import (
    DEFAULT_PROFILE_STEP_M,
    DEFAULT_STRIDE,
    DEFAULT_WALL_HEIGHT_M,
)


class Settings(BaseSettings):
    # Directory holding the bundled GPX/FIT tracks (relative to backend working dir)
    tracks_dir: str = "tracks"
    # Named tracks exposed by the API: name -> filename inside tracks_dir
    track_files: dict[str, str] = {
        "cycling": "cycling.gpx",
        "paragliding": "paragliding.gpx",
    }

    # Derivation defaults
    default_stride: int = DEFAULT_STRIDE
    wall_height_m: float = DEFAULT_WALL_HEIGHT_M
    profile_step_m: float = DEFAULT_PROFILE_STEP_M

    # Remote GPX fetching
    fetch_timeout_s: float = 30.0

    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        if v in ("", None):
            return "INFO"
        return str(v).upper()

    class Config:
        env_file = ".env"
        env_prefix = "TRACKSCENE_"


settings = Settings()
