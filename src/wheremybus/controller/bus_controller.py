import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from ..error.client_input_error import ClientInputError
from ..model.bus_update_request import BusUpdateRequest
from ..model.nearest_result import NearestResult
from ..model.status_response import StatusResponse

router = APIRouter()

logger = logging.getLogger(__name__)


def get_service():
    from ..app import tracking_service
    return tracking_service


@router.get("/")
async def root():
    """Health check endpoint"""
    return {"message": "Where Is My Bus backend is running"}


@router.post("/api/updateBus", response_model=StatusResponse)
def update_bus(request: BusUpdateRequest, service=Depends(get_service)):
    """
    Store the latest state reported by a bus tracker
    """
    try:
        service.update_bus(request.model_dump())
        return StatusResponse()

    except ClientInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        logger.error(f"Error in bus update: {e}")
        raise HTTPException(status_code=500, detail=f"Bus update failed: {str(e)}")


@router.get("/api/buses", response_model=List[Dict[str, Any]])
def list_buses(service=Depends(get_service)):
    """
    Get every known bus with its latest reported state.
    """
    try:
        return service.list_buses()

    except Exception as e:
        logger.error(f"Error listing buses: {e}")
        raise HTTPException(status_code=500, detail=f"Listing buses failed: {str(e)}")


@router.get("/api/nearest", response_model=List[NearestResult])
def nearest_buses(
    lat: Optional[str] = Query(None, description="Latitude of the query point (decimal degrees)"),
    lng: Optional[str] = Query(None, description="Longitude of the query point (decimal degrees)"),
    limit: Optional[str] = Query(None, description="Maximum number of buses to return (default 5)"),
    service=Depends(get_service)
):
    """
    Get the buses closest to the given coordinates, nearest first.
    """
    try:
        return service.nearest(lat, lng, limit)

    except ClientInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        logger.error(f"Error in nearest query: {e}")
        raise HTTPException(status_code=500, detail=f"Nearest query failed: {str(e)}")
