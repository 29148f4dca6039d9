import asyncio
import itertools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, TypeVar

from .exceptions import GeocodingError
from .maps_service import distance_between
from .models import (
    Candidate,
    Coordinate,
    MapsClient,
    OptimizedWaypoints,
    PlaceType,
)
from .waypoints import collect_anchors, separate_waypoints


logger = logging.getLogger(__name__)

# --- Module-level constants ---
DEFAULT_MAX_CONCURRENT_REQUESTS = 10

T = TypeVar('T')

CandidateMatrix = Dict[PlaceType, List[Candidate]]


def generate_combinations(lists: Sequence[Sequence[T]]) -> List[List[T]]:
    """
    Every way of picking one item from each list.
    The first list varies slowest and the last list fastest. No lists gives a
    single empty combination; any empty list gives no combinations at all.
    """
    return [list(combination) for combination in itertools.product(*lists)]


def total_travel_time(routes: List[Dict]) -> int:
    """Sum of the duration of every leg of every route, in seconds"""
    return sum(
        leg['duration']['value']
        for route in routes
        for leg in route.get('legs', [])
    )


def index_of_shortest(costs: Sequence[int]) -> Optional[int]:
    """Index of the smallest cost; on ties the earliest one wins"""
    best_index = None
    for index, cost in enumerate(costs):
        if best_index is None or cost < costs[best_index]:
            best_index = index
    return best_index


def describe_route(routes: List[Dict], waypoints: List[str]) -> Dict:
    """Summarize a directions response for a client: visiting order, legs and total time"""
    order = routes[0].get('waypoint_order', list(range(len(waypoints)))) if routes else []
    ordered = [waypoints[i] for i in order if i < len(waypoints)]

    legs = []
    for route in routes:
        for leg in route.get('legs', []):
            duration = leg.get('duration', {})
            legs.append({
                'start_address': leg.get('start_address'),
                'end_address': leg.get('end_address'),
                'duration_seconds': duration.get('value'),
                'distance_meters': leg.get('distance', {}).get('value'),
                'summary': f"{duration.get('text')} to travel to {leg.get('end_address')}",
            })

    return {
        'route': ordered,
        'legs': legs,
        'total_duration_seconds': total_travel_time(routes),
    }


class RouteOptimizer:
    """
    Picks a concrete place for every category waypoint so that the whole
    trip from origin to destination takes the least time.

    Only the choice of place per category is searched; the visiting order of
    each candidate itinerary is left to the Directions API.
    """

    def __init__(self, maps_service: MapsClient, max_concurrent_requests: int = DEFAULT_MAX_CONCURRENT_REQUESTS):
        if max_concurrent_requests < 1:
            raise ValueError("max_concurrent_requests must be at least 1")
        self.maps_service = maps_service
        self.max_concurrent_requests = max_concurrent_requests

    def _run(self, coroutine_function, *args):
        """Run a coroutine with its own event loop and request-scoped executor"""
        loop = asyncio.new_event_loop()
        try:
            with ThreadPoolExecutor(max_workers=self.max_concurrent_requests) as executor:
                return loop.run_until_complete(coroutine_function(executor, *args))
        finally:
            loop.close()

    @staticmethod
    async def _call(executor: ThreadPoolExecutor, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(executor, func, *args)

    # --- Candidate resolution ---
    def resolve_candidates(self, place_types: List[PlaceType], anchors: List[Coordinate]) -> CandidateMatrix:
        return self._run(self.resolve_candidates_async, place_types, anchors)

    async def resolve_candidates_async(self, executor: ThreadPoolExecutor, place_types: List[PlaceType],
                                       anchors: List[Coordinate]) -> CandidateMatrix:
        """
        Search for the nearest place of every type around every anchor.
        Anchors with no match add nothing, so a list can be shorter than the anchors.
        """
        pairs = [(place_type, anchor) for place_type in place_types for anchor in anchors]
        places = await asyncio.gather(*[
            self._call(executor, self.maps_service.search_nearby, anchor, place_type)
            for place_type, anchor in pairs
        ])

        matrix: CandidateMatrix = {place_type: [] for place_type in place_types}
        for (place_type, anchor), place in zip(pairs, places):
            if place is None:
                logger.info("No %s found near %s", place_type.value, anchor.as_tuple())
                continue
            distance = distance_between(anchor, place.location) if place.location else None
            matrix[place_type].append(Candidate(place_type, anchor, place, distance))
        return matrix

    # --- Route evaluation ---
    def choose_shortest_combination(self, origin: str, destination: str,
                                    combinations: List[List[Candidate]],
                                    street_address_waypoints: List[str]) -> OptimizedWaypoints:
        return self._run(self.choose_shortest_combination_async, origin, destination,
                         combinations, street_address_waypoints)

    async def choose_shortest_combination_async(self, executor: ThreadPoolExecutor, origin: str, destination: str,
                                                combinations: List[List[Candidate]],
                                                street_address_waypoints: List[str]) -> OptimizedWaypoints:
        """
        Ask for directions once per combination and keep the fastest.
        Street addresses come first in every request, followed by the combination's places.
        """
        if not combinations:
            return OptimizedWaypoints(waypoints=list(street_address_waypoints))

        requests = [
            list(street_address_waypoints) + [candidate.token for candidate in combination]
            for combination in combinations
        ]
        responses = await asyncio.gather(*[
            self._call(executor, self.maps_service.get_directions, origin, destination, waypoints, True)
            for waypoints in requests
        ])
        costs = [total_travel_time(routes) for routes in responses]

        best = index_of_shortest(costs)
        logger.info(
            "Evaluated %d waypoint combinations; fastest takes %ss",
            len(combinations), costs[best]
        )
        return OptimizedWaypoints(
            waypoints=requests[best],
            chosen=list(combinations[best]),
            travel_time_seconds=costs[best],
            combinations_evaluated=len(combinations),
        )

    # --- Full pipeline ---
    def optimize_waypoints(self, origin: str, destination: str, waypoints: List[str]) -> OptimizedWaypoints:
        """
        Resolve every category waypoint to a concrete place and return the
        waypoint list with the shortest total travel time.
        """
        return self._run(self.optimize_waypoints_async, origin, destination, waypoints)

    async def optimize_waypoints_async(self, executor: ThreadPoolExecutor, origin: str, destination: str,
                                       waypoints: List[str]) -> OptimizedWaypoints:
        geocode = self.maps_service.geocode
        origin_result, destination_result = await asyncio.gather(
            self._call(executor, geocode, origin),
            self._call(executor, geocode, destination),
        )
        if origin_result is None or destination_result is None:
            raise GeocodingError("Origin or destination is invalid")

        results = await asyncio.gather(*[self._call(executor, geocode, waypoint) for waypoint in waypoints])
        separated = separate_waypoints(waypoints, list(results))
        logger.info(
            "Classified %d waypoints: %d street addresses, %d categories, %d dropped",
            len(waypoints), len(separated.street_addresses), len(separated.categories), len(separated.unresolved)
        )

        anchors = collect_anchors(origin_result.coordinate, destination_result.coordinate, separated.street_addresses)
        matrix = await self.resolve_candidates_async(executor, separated.place_types, anchors)

        for place_type, candidates in matrix.items():
            if not candidates:
                logger.warning("No %s found near any anchor; no combination can be routed", place_type.value)

        combinations = generate_combinations(list(matrix.values()))
        return await self.choose_shortest_combination_async(
            executor, origin, destination, combinations, separated.street_address_texts
        )

    def plan_route(self, origin: str, destination: str, waypoints: List[str]) -> Dict:
        """Optimize the waypoints, then fetch and describe the final route"""
        optimized = self.optimize_waypoints(origin, destination, waypoints)
        routes = self.maps_service.get_directions(origin, destination, optimized.waypoints, True)

        plan = describe_route(routes, optimized.waypoints)
        plan['waypoints'] = optimized.waypoints
        plan['combinations_evaluated'] = optimized.combinations_evaluated
        plan['stops'] = [
            {
                'place_type': candidate.place_type.value,
                'place_id': candidate.place.place_id,
                'name': candidate.place.name,
                'vicinity': candidate.place.vicinity,
                'anchor': candidate.anchor.to_dict(),
                'distance_from_anchor_meters': round(candidate.distance_meters, 1)
                if candidate.distance_meters is not None else None,
            }
            for candidate in optimized.chosen
        ]
        return plan
