from math import radians, sin, cos, sqrt, atan2

import numpy as np

EARTH_RADIUS_METERS = 6371000


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great-circle distance (in meters) between two points."""
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    a = min(1.0, max(0.0, a))
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def haversine_many(
        lat: float,
        lon: float,
        lats: np.ndarray,
        lons: np.ndarray
) -> np.ndarray:
    """Distance (in meters) from one point to each of a batch of points.

    Args:
        lat: Latitude of the reference point (degrees).
        lon: Longitude of the reference point (degrees).
        lats: Latitudes of the candidate points (degrees).
        lons: Longitudes of the candidate points (degrees).

    Returns:
        Array of distances, one per candidate, in the same order.
    """
    lat1 = np.radians(lat)
    lon1 = np.radians(lon)
    lat2 = np.radians(np.asarray(lats, dtype=float))
    lon2 = np.radians(np.asarray(lons, dtype=float))

    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c
