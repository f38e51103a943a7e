import copy
import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

from ..distance import haversine_many
from ..error.client_input_error import ClientInputError
from ..model.nearest_result import NearestResult
from ..model.vehicle_state import VehicleState
from ..utils.vehicle_store import VehicleStore

logger = logging.getLogger(__name__)

DEFAULT_NEAREST_LIMIT = 5
MAX_NEAREST_LIMIT = 100


def _to_finite_float(value: Any) -> Optional[float]:
    """Coerce a number or numeric string to a finite float, None otherwise."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _extract_position(state: VehicleState) -> Optional[Tuple[float, float]]:
    """(lat, lng) of a vehicle, or None when it has no usable position"""
    gps = state.position
    if not isinstance(gps, Mapping) or gps.get("lat") is None:
        return None

    lat = _to_finite_float(gps.get("lat"))
    lng = _to_finite_float(gps.get("lng"))
    if lat is None or lng is None:
        return None
    return lat, lng


def _round_half_up(distance: float) -> int:
    return int(math.floor(distance + 0.5))


class TrackingService:
    def __init__(self, store: VehicleStore, default_limit: int = DEFAULT_NEAREST_LIMIT,
                 max_limit: int = MAX_NEAREST_LIMIT):
        self.store = store
        self.default_limit = default_limit
        self.max_limit = max_limit

    def update_bus(self, payload: Dict[str, Any]) -> VehicleState:
        """Store the latest report of a bus, keyed by its ``bus_id``"""
        bus_id = payload.get("bus_id")
        if bus_id is None or isinstance(bus_id, bool) or str(bus_id) == "":
            raise ClientInputError("Missing bus_id")

        state = self.store.upsert(str(bus_id), payload)
        logger.info(f"Updated: {state.vehicle_id}")
        return state

    def list_buses(self) -> List[Dict[str, Any]]:
        """Every stored record as submitted, plus ``last_update``"""
        return [state.to_record() for state in self.store.list_all()]

    def _resolve_limit(self, limit: Any) -> int:
        if limit is None or isinstance(limit, bool):
            return self.default_limit
        number = _to_finite_float(limit.strip() if isinstance(limit, str) else limit)
        if number is None:
            logger.debug(f"Ignoring non-numeric limit {limit!r}, using {self.default_limit}")
            return self.default_limit
        # Fractional limits truncate toward zero
        return min(int(number), self.max_limit)

    def nearest(self, lat: Any, lng: Any, limit: Any = None) -> List[NearestResult]:
        """
        Rank the vehicles closest to a point.

        Args:
            lat: Query latitude (number or numeric string).
            lng: Query longitude (number or numeric string).
            limit: Maximum number of results; defaults when absent or not an integer.

        Returns:
            Up to ``limit`` results ordered by ascending distance. Vehicles
            without a usable position are skipped.

        Raises:
            ClientInputError: If ``lat`` or ``lng`` is not a finite number.
        """
        query_lat = _to_finite_float(lat)
        query_lng = _to_finite_float(lng)
        if query_lat is None or query_lng is None:
            raise ClientInputError("Invalid lat/lng")

        count = self._resolve_limit(limit)
        if count < 1:
            return []

        candidates = []
        positions = []
        for state in self.store.list_all():
            position = _extract_position(state)
            if position is None:
                continue
            candidates.append(state)
            positions.append(position)

        logger.debug(f"Ranking {len(candidates)} vehicles around ({query_lat}, {query_lng})")
        if not candidates:
            return []

        coords = np.asarray(positions, dtype=float)
        distances = haversine_many(query_lat, query_lng, coords[:, 0], coords[:, 1])
        # Sort the whole eligible set before truncating; ties keep store order.
        order = np.argsort(distances, kind="stable")[:count]

        return [
            NearestResult(
                vehicle_id=candidates[i].vehicle_id,
                position=copy.deepcopy(candidates[i].position),
                passenger_count=candidates[i].passenger_count,
                crowd_density=candidates[i].crowd_density,
                distance_meters=_round_half_up(float(distances[i])),
                last_update=candidates[i].last_update,
            )
            for i in order
        ]
