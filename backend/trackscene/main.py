import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from trackscene.api.tracks import router as tracks_router
from trackscene.core.config import settings


# Logger
logger = logging.getLogger("trackscene")
if not logger.handlers:
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger.setLevel(settings.log_level)

app = FastAPI(title="trackscene")

# Allow CORS for the map frontend
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tracks_router)


@app.get("/")
def root():
    return {"message": "trackscene backend is running"}
