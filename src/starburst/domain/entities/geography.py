import math
from dataclasses import dataclass

E6 = 1e6
EARTH_RADIUS_KM = 6371.0


# lat plays x and lng plays y in the planar intersection test
@dataclass(frozen=True)
class LatLng:
    lat: float  # degrees
    lng: float

    @classmethod
    def from_e6(cls, lat_e6: int, lng_e6: int) -> "LatLng":
        return cls(lat_e6 / E6, lng_e6 / E6)

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lng)


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometers between two points given in degrees."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
