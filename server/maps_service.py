import logging
from typing import Dict, List, Optional

import googlemaps
from googlemaps.exceptions import ApiError, Timeout, TransportError
from geopy.distance import geodesic

from .exceptions import DirectionsError, GeocodingError, PlacesError
from .models import Coordinate, GeocodeResult, NearbyPlace, PlaceType


logger = logging.getLogger(__name__)

# Failures raised by googlemaps.Client for a single request
GOOGLE_MAPS_ERRORS = (ApiError, TransportError, Timeout)


class GoogleMapsService:
    """Service for interacting with Google Maps APIs"""

    def __init__(self, api_key: str, travel_mode: str = "driving", client: Optional[googlemaps.Client] = None):
        if client is None:
            if not api_key or api_key == "your_api_key_here":
                raise ValueError("Valid Google Maps API key is required")
            client = googlemaps.Client(key=api_key)
        self.client = client
        self.travel_mode = travel_mode

    def geocode(self, address: str) -> Optional[GeocodeResult]:
        """
        Geocode an address using Google Maps Geocoding API.
        Only the first result is used; returns None when nothing matches.
        """
        try:
            results = self.client.geocode(address)
        except GOOGLE_MAPS_ERRORS as e:
            raise GeocodingError(f"Failed to geocode address: {address}") from e

        if not results:
            logger.debug("No geocoding result for %r", address)
            return None

        location = results[0]
        point = location['geometry']['location']
        return GeocodeResult(
            coordinate=Coordinate(point['lat'], point['lng']),
            address_types=list(location.get('types', [])),
            formatted_address=location.get('formatted_address', ''),
        )

    def search_nearby(self, location: Coordinate, place_type: PlaceType) -> Optional[NearbyPlace]:
        """
        Find the place of the given type closest to a location.
        Results are ranked by distance, so only the first one is kept.
        """
        try:
            places_result = self.client.places_nearby(
                location=location.as_tuple(),
                rank_by="distance",
                type=place_type.value
            )
        except GOOGLE_MAPS_ERRORS as e:
            raise PlacesError(f"Failed to search nearby {place_type.value} at {location.as_tuple()}") from e

        results = places_result.get('results', []) if places_result else []
        if not results:
            return None

        place = results[0]
        point = place.get('geometry', {}).get('location')
        return NearbyPlace(
            place_id=place['place_id'],
            name=place.get('name', ''),
            vicinity=place.get('vicinity', ''),
            location=Coordinate(point['lat'], point['lng']) if point else None,
        )

    def get_directions(self, origin: str, destination: str, waypoints: List[str],
                       optimize_waypoints: bool = True) -> List[Dict]:
        """
        Get directions visiting every waypoint, letting the Directions API reorder them.
        Returns the raw list of routes.
        """
        try:
            directions_result = self.client.directions(
                origin=origin,
                destination=destination,
                mode=self.travel_mode,
                waypoints=waypoints or None,
                optimize_waypoints=optimize_waypoints,
            )
        except GOOGLE_MAPS_ERRORS as e:
            raise DirectionsError(f"Failed to get directions from {origin} to {destination}") from e

        if not directions_result:
            raise DirectionsError(f"No route found from {origin} to {destination}")
        return directions_result


def distance_between(point1: Coordinate, point2: Coordinate) -> float:
    """Geodesic distance in meters between two coordinates"""
    return geodesic(point1.as_tuple(), point2.as_tuple()).meters
