from __future__ import annotations
from dataclasses import dataclass, field
import math

from popdistance.domain.errors import OutOfRangeError, as_number

"""
Spherical geometry helpers.

Points are stored in radians with the sine/cosine of the latitude computed once,
because the pairwise engine evaluates every point against every other point in its
period group. Distances use the mean-radius sphere (no ellipsoid modeling).
"""

# Mean radius in kilometers as defined by the IUGG.
EARTH_MEAN_RADIUS_KM = 6371.0088

# Same conversion as `from_degrees`, so the degree boundaries map onto these exactly.
_MAX_LAT_RAD = math.radians(90.0)
_MAX_LON_RAD = math.radians(180.0)


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in radians, with cached latitude trig values."""

    latitude: float
    longitude: float
    sin_lat: float = field(init=False, repr=False, compare=False)
    cos_lat: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lat = as_number(self.latitude, "latitude")
        lon = as_number(self.longitude, "longitude")
        if not -_MAX_LAT_RAD <= lat <= _MAX_LAT_RAD:
            raise OutOfRangeError(f"latitude {lat!r} rad out of range [-pi/2, pi/2]")
        if not -_MAX_LON_RAD <= lon <= _MAX_LON_RAD:
            raise OutOfRangeError(f"longitude {lon!r} rad out of range [-pi, pi]")
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)
        object.__setattr__(self, "sin_lat", math.sin(self.latitude))
        object.__setattr__(self, "cos_lat", math.cos(self.latitude))

    @classmethod
    def from_degrees(cls, latitude: float, longitude: float) -> "Coordinate":
        """Build a coordinate from decimal degrees, rejecting out-of-range values."""
        lat = as_number(latitude, "latitude")
        lon = as_number(longitude, "longitude")
        if not -90.0 <= lat <= 90.0:
            raise OutOfRangeError(f"latitude {lat!r} out of range [-90, 90]")
        if not -180.0 <= lon <= 180.0:
            raise OutOfRangeError(f"longitude {lon!r} out of range [-180, 180]")
        return cls(latitude=math.radians(lat), longitude=math.radians(lon))

    @property
    def latitude_deg(self) -> float:
        return math.degrees(self.latitude)

    @property
    def longitude_deg(self) -> float:
        return math.degrees(self.longitude)


def great_circle_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in kilometers (spherical Vincenty formula).

    The atan2 form stays accurate for both coincident and antipodal points, where the
    haversine and spherical law of cosines formulations lose precision.
    """
    # Canonical argument order keeps the result bitwise symmetric.
    if (a.latitude, a.longitude) > (b.latitude, b.longitude):
        a, b = b, a

    delta_lon = abs(a.longitude - b.longitude)
    cos_delta_lon = math.cos(delta_lon)

    x = b.cos_lat * math.sin(delta_lon)
    y = a.cos_lat * b.sin_lat - a.sin_lat * b.cos_lat * cos_delta_lon
    numerator = math.sqrt(x * x + y * y)
    denominator = a.sin_lat * b.sin_lat + a.cos_lat * b.cos_lat * cos_delta_lon

    return EARTH_MEAN_RADIUS_KM * math.atan2(numerator, denominator)
