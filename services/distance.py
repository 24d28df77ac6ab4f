"""
Delivery distance gate.

The address is resolved by a geocoder collaborator (anything with a
``geocode(query) -> Coordinates | None`` method); the great-circle distance
from the depot decides whether delivery is offered. Geocoder failures never
allow or block delivery on their own, they come back as "cannot verify".
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

import requests

from utils.logger import get_logger

logger = get_logger()

EARTH_RADIUS_KM = 6371.0


class Coordinates(NamedTuple):
    lat: float
    lon: float


class DistanceStatus(str, Enum):
    OK = "ok"
    TOO_FAR = "too_far"
    UNRESOLVED = "unresolved"    # geocoder found nothing
    UNAVAILABLE = "unavailable"  # geocoder could not be reached

    @property
    def verified(self) -> bool:
        return self in (DistanceStatus.OK, DistanceStatus.TOO_FAR)


@dataclass(frozen=True)
class DistanceCheck:
    status: DistanceStatus
    distance_km: Optional[float]
    max_km: float

    @property
    def message(self) -> str:
        if self.status is DistanceStatus.OK:
            return f"Delivery available ({self.distance_km:.1f} km from the depot)"
        if self.status is DistanceStatus.TOO_FAR:
            return (
                f"Address is {self.distance_km:.1f} km from the depot; "
                f"delivery is limited to {self.max_km:g} km"
            )
        return "Could not verify the delivery address. Please confirm it or contact us."

    def to_dict(self):
        return {
            "status": self.status.value,
            "distanceKm": self.distance_km,
            "maxKm": self.max_km,
            "message": self.message,
        }


class GeocoderUnavailable(Exception):
    pass


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlon = math.radians(b.lon - a.lon)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def build_query(city: str, address: Optional[str] = None) -> str:
    parts = [p.strip() for p in (address, city) if p and p.strip()]
    return ", ".join(parts)


def classify_distance(distance_km: float, max_km: float) -> DistanceStatus:
    # the radius itself is still deliverable
    return DistanceStatus.OK if distance_km <= max_km else DistanceStatus.TOO_FAR


def check_delivery_distance(city, address, geocoder, depot: Coordinates, max_km: float) -> DistanceCheck:
    query = build_query(city, address)
    if not query:
        return DistanceCheck(DistanceStatus.UNRESOLVED, None, max_km)

    try:
        point = geocoder.geocode(query)
    except GeocoderUnavailable as exc:
        logger.warning(f"Geocoder unavailable for '{query}': {exc}")
        return DistanceCheck(DistanceStatus.UNAVAILABLE, None, max_km)

    if point is None:
        return DistanceCheck(DistanceStatus.UNRESOLVED, None, max_km)

    # metre precision keeps the radius boundary stable under float noise
    distance_km = round(haversine_km(depot, point), 3)
    return DistanceCheck(classify_distance(distance_km, max_km), distance_km, max_km)


class NominatimGeocoder:
    """OpenStreetMap Nominatim search client."""

    def __init__(self, url: str, user_agent: str, country_codes: str = "pl", timeout: float = 5.0):
        self.url = url
        self.user_agent = user_agent
        self.country_codes = country_codes
        self.timeout = timeout

    def geocode(self, query: str) -> Optional[Coordinates]:
        params = {"q": query, "format": "json", "limit": 1}
        if self.country_codes:
            params["countrycodes"] = self.country_codes
        try:
            resp = requests.get(
                self.url,
                params=params,
                headers={"User-Agent": self.user_agent, "Accept-Language": "pl"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            results = resp.json()
        except (requests.exceptions.RequestException, ValueError) as exc:
            raise GeocoderUnavailable(str(exc)) from exc

        if not results:
            return None
        first = results[0]
        try:
            return Coordinates(float(first["lat"]), float(first["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocoderUnavailable(f"Malformed geocoder response: {exc}") from exc


def get_geocoder():
    from flask import current_app
    return current_app.extensions["geocoder"]


def depot_from_config(config) -> Coordinates:
    return Coordinates(config["DEPOT_LAT"], config["DEPOT_LON"])
