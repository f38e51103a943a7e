from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class BusUpdateRequest(BaseModel):
    # Trackers may report any extra telemetry; it is stored verbatim.
    model_config = ConfigDict(extra="allow")

    bus_id: Optional[Union[str, int]] = None
