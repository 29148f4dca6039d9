import threading
from typing import Callable, Dict, List, Optional, Tuple

from server.models import Coordinate, GeocodeResult, NearbyPlace, PlaceType


ORIGIN = Coordinate(0.0, 0.0)
DESTINATION = Coordinate(0.0, 1.0)
HOME = Coordinate(1.0, 1.0)


def street(coordinate: Coordinate) -> GeocodeResult:
    return GeocodeResult(coordinate, ['street_address'], 'somewhere')


def place(place_id: str, near: Coordinate) -> NearbyPlace:
    return NearbyPlace(place_id, name=place_id.title(), vicinity='nearby',
                       location=Coordinate(near.lat + 0.001, near.lng))


class FakeMapsService:
    """In-memory stand-in for GoogleMapsService that records every call"""

    def __init__(self,
                 geocodes: Dict[str, object],
                 nearby: Optional[Dict[Tuple[PlaceType, Coordinate], object]] = None,
                 route_cost: Optional[Callable[[List[str]], int]] = None,
                 directions_error: Optional[Exception] = None):
        self.geocodes = geocodes
        self.nearby = nearby or {}
        self.route_cost = route_cost or (lambda waypoints: 100)
        self.directions_error = directions_error
        self.geocode_calls: List[str] = []
        self.nearby_calls: List[Tuple[PlaceType, Coordinate]] = []
        self.directions_calls: List[List[str]] = []
        self._lock = threading.Lock()

    def geocode(self, address):
        with self._lock:
            self.geocode_calls.append(address)
        result = self.geocodes.get(address)
        if isinstance(result, Exception):
            raise result
        return result

    def search_nearby(self, location, place_type):
        with self._lock:
            self.nearby_calls.append((place_type, location))
        result = self.nearby.get((place_type, location))
        if isinstance(result, Exception):
            raise result
        return result

    def get_directions(self, origin, destination, waypoints, optimize_waypoints=True):
        with self._lock:
            self.directions_calls.append(list(waypoints))
        if self.directions_error is not None:
            raise self.directions_error
        cost = self.route_cost(list(waypoints))
        # first leg carries the whole cost so totals must sum every leg
        legs = [
            {
                'duration': {'value': cost if i == 0 else 0, 'text': f'{cost if i == 0 else 0} secs'},
                'distance': {'value': 1000},
                'start_address': origin if i == 0 else f'stop {i}',
                'end_address': destination if i == len(waypoints) else f'stop {i + 1}',
            }
            for i in range(len(waypoints) + 1)
        ]
        return [{'legs': legs, 'waypoint_order': list(reversed(range(len(waypoints))))}]
