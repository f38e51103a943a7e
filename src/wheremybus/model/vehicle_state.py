import copy
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class VehicleState(BaseModel):
    """Latest state reported for one vehicle.

    ``data`` holds the record exactly as the tracker submitted it;
    ``last_update`` is always assigned by the store (ms since epoch).
    """
    model_config = ConfigDict(frozen=True)

    vehicle_id: str
    last_update: int
    data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def position(self) -> Optional[Any]:
        return self.data.get("gps")

    @property
    def passenger_count(self) -> Optional[Any]:
        return self.data.get("passenger_count")

    @property
    def crowd_density(self) -> Optional[Any]:
        return self.data.get("crowd_density")

    def to_record(self) -> Dict[str, Any]:
        """Submitted record plus the server-assigned ``last_update``."""
        record = copy.deepcopy(self.data)
        record["last_update"] = self.last_update
        return record
