"""Great-circle geometry and the fix-significance policy.

Receivers jitter by a few meters even when stationary. ``ChangeDetector``
suppresses that noise by treating a new fix as significant only once it is
at least ``threshold_meters`` away from the previous one along the surface
of a spherical Earth.
"""

import math

from positioning.nmea.types import Fix

__all__ = [
    "DEFAULT_THRESHOLD_METERS",
    "EARTH_RADIUS_METERS",
    "ChangeDetector",
    "destination_point",
    "haversine_distance",
]

EARTH_RADIUS_METERS = 6_371_000.0
DEFAULT_THRESHOLD_METERS = 33.0


def haversine_distance(
    latitude1: float,
    longitude1: float,
    latitude2: float,
    longitude2: float,
) -> float:
    """Return the great-circle distance in meters between two points."""
    phi1 = math.radians(latitude1)
    phi2 = math.radians(latitude2)
    delta_phi = math.radians(latitude2 - latitude1)
    delta_lambda = math.radians(longitude2 - longitude1)
    a = (
        math.sin(delta_phi / 2.0) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2.0) ** 2
    )
    return 2.0 * EARTH_RADIUS_METERS * math.asin(math.sqrt(max(0.0, min(1.0, a))))


def destination_point(
    latitude: float,
    longitude: float,
    bearing_degrees: float,
    distance_meters: float,
) -> tuple[float, float]:
    """Return the point reached by travelling along a great circle.

    Args:
        latitude: Start latitude in decimal degrees.
        longitude: Start longitude in decimal degrees.
        bearing_degrees: Initial bearing, clockwise from true north.
        distance_meters: Distance to travel.

    Returns:
        ``(latitude, longitude)`` of the destination in decimal degrees,
        with longitude normalized to [-180, 180).
    """
    angular_distance = distance_meters / EARTH_RADIUS_METERS
    bearing = math.radians(bearing_degrees)
    phi1 = math.radians(latitude)
    lambda1 = math.radians(longitude)

    phi2 = math.asin(
        math.sin(phi1) * math.cos(angular_distance)
        + math.cos(phi1) * math.sin(angular_distance) * math.cos(bearing)
    )
    lambda2 = lambda1 + math.atan2(
        math.sin(bearing) * math.sin(angular_distance) * math.cos(phi1),
        math.cos(angular_distance) - math.sin(phi1) * math.sin(phi2),
    )

    normalized_longitude = (math.degrees(lambda2) + 540.0) % 360.0 - 180.0
    return math.degrees(phi2), normalized_longitude


class ChangeDetector:
    """Decide whether a candidate fix moved far enough to matter.

    The caller is responsible for rejecting the (0, 0) no-fix sentinel
    before asking; this class treats every coordinate pair as a position.

    Args:
        threshold_meters: Minimum surface distance for a significant change
            (default: 33 m).
    """

    def __init__(self, threshold_meters: float = DEFAULT_THRESHOLD_METERS) -> None:
        if threshold_meters <= 0:
            raise ValueError(f"threshold_meters must be positive, got {threshold_meters}")
        self._threshold_meters = threshold_meters

    @property
    def threshold_meters(self) -> float:
        return self._threshold_meters

    def distance(self, previous: Fix, candidate: Fix) -> float:
        return haversine_distance(
            previous.latitude,
            previous.longitude,
            candidate.latitude,
            candidate.longitude,
        )

    def is_significant(self, previous: Fix | None, candidate: Fix) -> bool:
        """Return True if ``candidate`` should replace ``previous``.

        The first fix ever seen (``previous`` is None) is always significant.
        """
        if previous is None:
            return True
        return self.distance(previous, candidate) >= self._threshold_meters
