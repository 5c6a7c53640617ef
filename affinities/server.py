from fastapi import Depends, FastAPI, HTTPException, Response
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
import os
import logging
import random
from affinities.avatars import Fetcher, fetch_avatar
from affinities.cloud import AffinityCloud, NoAffinitiesError
from affinities.constants import NO_AFFINITIES_MESSAGE, OUTPUT_FILENAME, SAVE_DIR
from affinities.logging_config import level_from_env, setup_logging
from affinities.request_models import *
from affinities.scoring import rank_affinities

setup_logging(level_from_env())
logger = logging.getLogger(__name__)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

CLOUD_DIR = os.path.abspath(os.getenv("AFFINITIES_OUT_DIR", SAVE_DIR))
os.makedirs(CLOUD_DIR, exist_ok=True)
app.mount("/past_clouds", StaticFiles(directory=CLOUD_DIR), name="past_clouds")

def get_fetcher() -> Fetcher:
    return fetch_avatar

def build_cloud(request: CloudRequest, fetcher: Fetcher = fetch_avatar) -> AffinityCloud:
    items = rank_affinities(request.affinities, request.contacts,
                            use_v1=request.algorithm == "v1", count=request.count)
    rng = random.Random(request.seed) if request.seed is not None else None
    try:
        return AffinityCloud(items, show_labels=request.show_labels, rng=rng, fetcher=fetcher)
    except NoAffinitiesError:
        raise HTTPException(status_code=404, detail=NO_AFFINITIES_MESSAGE)

@app.get("/api/health")
def health_check() -> StatusResponse:
    return StatusResponse(status_code=200)

@app.post("/api/layout")
def layout_cloud(request: CloudRequest) -> LayoutResponse:
    # layout only, no avatar downloads
    cloud = build_cloud(request)
    data = cloud.placement_data()
    return LayoutResponse(canvas=CanvasModel(**data["canvas"]),
                          placements=[Placement(**p) for p in data["placements"]])

@app.post("/api/cloud")
def cloud_image(request: CloudRequest, fetcher: Fetcher = Depends(get_fetcher)):
    cloud = build_cloud(request, fetcher)
    try:
        png = cloud.to_png()
    except (OSError, ValueError) as e:
        logger.exception("could not encode cloud")
        return StatusResponse(status_code=500, detail=f"Couldn't generate the image: {e}")
    return Response(content=png, media_type="image/png",
                    headers={"Content-Disposition": f'attachment; filename="{OUTPUT_FILENAME}"'})

@app.post("/api/save_cloud")
def save_cloud(request: CloudRequest, fetcher: Fetcher = Depends(get_fetcher)) -> SavedCloudResponse:
    cloud = build_cloud(request, fetcher)
    try:
        png_path, json_path = cloud.save_cloud(CLOUD_DIR)
    except OSError as e:
        logger.exception("could not save cloud")
        return SavedCloudResponse(status="error", filename=str(e))
    return SavedCloudResponse(status="success", filename=os.path.basename(png_path))
