"""
Great-circle distance helpers.

Pure functions only: no database access, no failure modes.
"""

from collections import namedtuple
from collections.abc import Mapping
from math import atan2, cos, radians, sin, sqrt

EARTH_RADIUS_KM = 6371

Coordinate = namedtuple('Coordinate', ['lat', 'lng'])

Ranked = namedtuple('Ranked', ['item', 'distance_km'])


def distance_km(a, b):
    """
    Haversine distance between two coordinates in kilometres,
    rounded to 2 decimal places.
    """
    lat1, lng1 = a
    lat2, lng2 = b

    d_lat = radians(lat2 - lat1)
    d_lng = radians(lng2 - lng1)

    h = (
        sin(d_lat / 2) ** 2
        + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lng / 2) ** 2
    )
    c = 2 * atan2(sqrt(h), sqrt(1 - h))

    return round(EARTH_RADIUS_KM * c, 2)


def locate(item):
    """
    Default coordinate extractor for rank_by_distance.

    Accepts a Coordinate or (lat, lng) tuple, a mapping with
    latitude/longitude keys, or an object with latitude/longitude attributes.
    """
    if isinstance(item, tuple):
        return Coordinate(*item[:2])
    if isinstance(item, Mapping):
        return Coordinate(item['latitude'], item['longitude'])
    return Coordinate(item.latitude, item.longitude)


def rank_by_distance(reference, items, locate=locate):
    """
    Annotate each item with its distance from reference and sort ascending.

    Ties keep their input order. Returns a new list, so the result can be
    walked as many times as needed.
    """
    ranked = [Ranked(item, distance_km(reference, locate(item))) for item in items]
    ranked.sort(key=lambda r: r.distance_km)
    return ranked
