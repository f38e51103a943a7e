from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from wheremybus.app import app
from wheremybus.controller.bus_controller import get_service
from wheremybus.service.tracking_service import TrackingService
from wheremybus.utils.vehicle_store import VehicleStore

FIXED_NOW_MS = 1_760_000_000_000


class FakeClock:
    def __init__(self, now_ms: int = FIXED_NOW_MS) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += int(seconds * 1000)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> VehicleStore:
    return VehicleStore(clock=clock)


@pytest.fixture
def service(store: VehicleStore) -> TrackingService:
    return TrackingService(store)


@pytest.fixture
def client(service: TrackingService):
    app.dependency_overrides[get_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
