from typing import Any, Optional

from pydantic import BaseModel


class NearestResult(BaseModel):
    vehicle_id: str
    position: Any
    passenger_count: Optional[Any] = None
    crowd_density: Optional[Any] = None
    distance_meters: int
    last_update: int
