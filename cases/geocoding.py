"""
Reverse geocoding for SOS intake.

Includes:
- LocationResolverService: address lookup via OpenStreetMap Nominatim

Only the intake view calls this; dispatch never waits on an address.
"""

import logging

import requests

logger = logging.getLogger(__name__)


class LocationResolverService:
    """
    Resolves a readable address from GPS coordinates using Nominatim.

    - 3-second timeout (never blocks SOS creation)
    - Returns None on any failure
    """

    NOMINATIM_API = "https://nominatim.openstreetmap.org/reverse"
    TIMEOUT_SECONDS = 3
    ZOOM_LEVEL = 18
    USER_AGENT = 'SaathiDispatch/1.0'

    @classmethod
    def resolve_address(cls, latitude, longitude):
        """
        Resolve an address from coordinates.

        Returns:
            str: e.g. "Janpath, Saheed Nagar, Bhubaneswar"
                 None if resolution fails or coordinates are invalid
        """
        if latitude is None or longitude is None:
            return None

        try:
            lat = float(latitude)
            lon = float(longitude)
        except (TypeError, ValueError):
            logger.warning(f"[LocationResolver] Invalid coordinates: {latitude}, {longitude}")
            return None

        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            logger.warning(f"[LocationResolver] Coordinates out of range: lat={lat}, lon={lon}")
            return None

        params = {
            'format': 'json',
            'lat': lat,
            'lon': lon,
            'zoom': cls.ZOOM_LEVEL,
            'addressdetails': 1,
        }

        try:
            response = requests.get(
                cls.NOMINATIM_API,
                params=params,
                timeout=cls.TIMEOUT_SECONDS,
                headers={'User-Agent': cls.USER_AGENT},
            )
            response.raise_for_status()
            data = response.json()
        except requests.Timeout:
            logger.warning(f"[LocationResolver] Nominatim timeout for {lat}, {lon}")
            return None
        except requests.RequestException as e:
            logger.warning(f"[LocationResolver] Nominatim error: {e}")
            return None
        except ValueError:
            logger.warning("[LocationResolver] Nominatim returned invalid JSON")
            return None

        address = data.get('address') or {}

        # road -> neighbourhood -> suburb -> city
        parts = [
            address[key]
            for key in ('road', 'neighbourhood', 'suburb', 'city')
            if address.get(key)
        ]
        if not parts:
            parts = [address[key] for key in ('state', 'country') if address.get(key)]

        if not parts:
            logger.info(f"[LocationResolver] No address found for {lat}, {lon}")
            return None

        resolved = ', '.join(parts[:3])
        logger.info(f"[LocationResolver] Resolved {lat}, {lon} -> {resolved}")
        return resolved
