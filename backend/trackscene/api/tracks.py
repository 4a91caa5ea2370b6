from typing import Optional
from fastapi import APIRouter, Query, HTTPException, UploadFile, File
from trackscene.schemas.track import ProfileSample, RenderMode, Scene, Track, TrackListing
from trackscene.core.config import settings
from trackscene.core.errors import TrackError, UnsupportedFormat
from trackscene.core.loaders import load_track, load_track_bytes, named_track_path
from trackscene.core.metrics import elevation_profile
from trackscene.core.scene import build_scene

router = APIRouter(prefix="/tracks", tags=["tracks"])


def _load_named(name: str) -> Track:
    path = named_track_path(name)
    if path is None:
        raise HTTPException(status_code=404, detail="Track not found")
    try:
        return load_track(path)
    except TrackError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _scene_or_422(track: Track, render_mode, stride, wall_height) -> Scene:
    try:
        return build_scene(track, render_mode, stride=stride, wall_height=wall_height)
    except TrackError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/", response_model=list[TrackListing])
def list_tracks():
    return [
        TrackListing(name=name, filename=filename)
        for name, filename in sorted(settings.track_files.items())
        if named_track_path(name) is not None
    ]


@router.get("/{name}/scene", response_model=Scene)
def get_track_scene(
    name: str,
    render_mode: RenderMode = Query(RenderMode.simple),
    stride: Optional[int] = Query(None, ge=1),
    wall_height: Optional[float] = Query(None, gt=0),
):
    track = _load_named(name)
    return _scene_or_422(track, render_mode, stride, wall_height)


@router.get("/{name}/profile", response_model=list[ProfileSample])
def get_track_profile(name: str, step_m: Optional[float] = Query(None, gt=0)):
    track = _load_named(name)
    try:
        return elevation_profile(track, step_m if step_m is not None else settings.profile_step_m)
    except TrackError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/scene", response_model=Scene)
def upload_track_scene(
    file: UploadFile = File(...),
    render_mode: RenderMode = Query(RenderMode.simple),
    stride: Optional[int] = Query(None, ge=1),
    wall_height: Optional[float] = Query(None, gt=0),
):
    """Build a scene straight from an uploaded .gpx/.fit file (nothing is stored)."""
    filename = file.filename or "upload.gpx"
    data = file.file.read()
    try:
        track = load_track_bytes(data, filename)
    except UnsupportedFormat as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TrackError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _scene_or_422(track, render_mode, stride, wall_height)
