"""
Waypoint classification.

Every raw waypoint is geocoded once. A precise address becomes a fixed
``StreetAddress`` stop; anything else is mapped to a searchable
``PlaceType`` so a concrete place can be picked for it later. Waypoints
that fit neither are dropped without failing the request.
"""

import logging
from typing import List, Optional

from .models import (
    PRECISE_ADDRESS_TYPES,
    Category,
    Coordinate,
    GeocodeResult,
    PlaceType,
    SeparatedWaypoints,
    StreetAddress,
    Unresolved,
    Waypoint,
)


logger = logging.getLogger(__name__)


def is_street_address(result: GeocodeResult) -> bool:
    return any(address_type in PRECISE_ADDRESS_TYPES for address_type in result.address_types)


def to_place_type(text: str, result: Optional[GeocodeResult]) -> Optional[PlaceType]:
    """Map a geocoding result's types, then the waypoint text itself, to a place type"""
    if result is not None:
        for address_type in result.address_types:
            place_type = PlaceType.from_text(address_type)
            if place_type is not None:
                return place_type
    return PlaceType.from_text(text)


def classify_waypoint(text: str, result: Optional[GeocodeResult]) -> Waypoint:
    """Classify a waypoint from its (possibly missing) geocoding result"""
    if result is not None and is_street_address(result):
        return StreetAddress(text, result.coordinate)

    place_type = to_place_type(text, result)
    if place_type is not None:
        return Category(text, place_type)
    return Unresolved(text)


def separate_waypoints(waypoints: List[str], results: List[Optional[GeocodeResult]]) -> SeparatedWaypoints:
    """
    Split waypoints into street addresses and categories.
    ``results`` holds the geocoding result of each waypoint, in the same order.
    """
    separated = SeparatedWaypoints()
    for text, result in zip(waypoints, results):
        waypoint = classify_waypoint(text, result)
        if isinstance(waypoint, StreetAddress):
            separated.street_addresses.append(waypoint)
        elif isinstance(waypoint, Category):
            separated.categories.append(waypoint)
        elif isinstance(waypoint, Unresolved):
            logger.warning("Dropping waypoint %r: neither a street address nor a known place type", text)
            separated.unresolved.append(waypoint)
        else:
            raise TypeError(f"Unexpected waypoint classification: {waypoint!r}")
    return separated


def collect_anchors(origin: Coordinate, destination: Coordinate,
                    street_addresses: List[StreetAddress]) -> List[Coordinate]:
    """Origin, destination and every street address coordinate, in that order"""
    anchors = [origin, destination]
    anchors.extend(waypoint.coordinate for waypoint in street_addresses)
    return anchors
