"""
geo.py
Great-circle distance between restaurant locations
"""

from typing import Optional

from geopy.distance import great_circle

from models import Location

EARTH_RADIUS_KM = 6371.0
UNKNOWN_DISTANCE = float('inf')


def great_circle_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in kilometers on a 6371 km sphere"""
    return great_circle((lat1, lng1), (lat2, lng2), radius=EARTH_RADIUS_KM).kilometers


def distance_between(a: Optional[Location], b: Optional[Location]) -> float:
    """Distance between two locations; UNKNOWN_DISTANCE when either is missing"""
    if a is None or b is None:
        return UNKNOWN_DISTANCE
    return great_circle_distance(a.latitude, a.longitude, b.latitude, b.longitude)
