import copy
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from ..error.client_input_error import ClientInputError
from ..model.vehicle_state import VehicleState

logger = logging.getLogger(__name__)


def _now_millis() -> int:
    return int(time.time() * 1000)


class VehicleStore:
    def __init__(self, clock: Callable[[], int] = _now_millis, stale_after_seconds: Optional[float] = None):
        """
        In-memory store holding the latest state of every vehicle

        :param clock: Returns the current time in milliseconds since epoch
        :param stale_after_seconds: Evict vehicles not updated for this long (None: never)
        """
        self._clock = clock
        self._stale_after_ms = None if stale_after_seconds is None else int(stale_after_seconds * 1000)
        self._vehicles: Dict[str, VehicleState] = {}
        self._lock = threading.RLock()

    def upsert(self, vehicle_id: str, fields: Dict[str, Any]) -> VehicleState:
        """
        Replace the stored state of a vehicle with the submitted fields

        :param vehicle_id: Unique vehicle identifier
        :param fields: Record as submitted by the tracker
        :return: The stored state, stamped with ``last_update``
        """
        if not vehicle_id:
            raise ClientInputError("Missing bus_id")

        state = VehicleState(
            vehicle_id=vehicle_id,
            last_update=self._clock(),
            data=copy.deepcopy(dict(fields)),
        )
        with self._lock:
            self._evict_stale()
            self._vehicles[vehicle_id] = state
        return state

    def get(self, vehicle_id: str) -> Optional[VehicleState]:
        with self._lock:
            self._evict_stale()
            return self._vehicles.get(vehicle_id)

    def list_all(self) -> List[VehicleState]:
        """Snapshot of every stored vehicle, in first-seen order."""
        with self._lock:
            self._evict_stale()
            return list(self._vehicles.values())

    def clear(self) -> None:
        with self._lock:
            self._vehicles.clear()

    def __len__(self) -> int:
        with self._lock:
            self._evict_stale()
            return len(self._vehicles)

    def _evict_stale(self) -> None:
        # Caller must hold the lock.
        if self._stale_after_ms is None:
            return

        cutoff = self._clock() - self._stale_after_ms
        stale = [vid for vid, state in self._vehicles.items() if state.last_update < cutoff]
        for vid in stale:
            del self._vehicles[vid]
        if stale:
            logger.info(f"Evicted {len(stale)} stale vehicles: {stale}")
