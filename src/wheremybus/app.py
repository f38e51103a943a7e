import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .controller.bus_controller import router as bus_router
from .service.tracking_service import TrackingService, DEFAULT_NEAREST_LIMIT, MAX_NEAREST_LIMIT
from .utils.vehicle_store import VehicleStore

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)


def _optional_float(name: str):
    value = os.environ.get(name)
    return float(value) if value else None


def build_tracking_service() -> TrackingService:
    """Build the store and service from environment settings"""
    vehicle_store = VehicleStore(stale_after_seconds=_optional_float("STALE_VEHICLE_TTL_SECONDS"))
    return TrackingService(
        vehicle_store,
        default_limit=int(os.environ.get("NEAREST_DEFAULT_LIMIT", DEFAULT_NEAREST_LIMIT)),
        max_limit=int(os.environ.get("NEAREST_MAX_LIMIT", MAX_NEAREST_LIMIT)),
    )


# Initialize services
tracking_service = build_tracking_service()

# Initialize FastAPI app
app = FastAPI(title="Where Is My Bus API", description="Live bus positions and nearest-bus queries",
              version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in os.environ.get("CORS_ALLOW_ORIGINS", "*").split(",")],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(bus_router)

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 3000))
    logger.info(f"Backend running on http://localhost:{port}")
    uvicorn.run(app, host=os.environ.get("HOST", "0.0.0.0"), port=port)
