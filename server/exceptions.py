"""Errors raised by the Google Maps backed services."""


class MapsServiceError(Exception):
    """Base class for failures talking to one of the Google Maps APIs"""


class GeocodingError(MapsServiceError):
    """Raised when the Geocoding API fails or an origin/destination cannot be resolved"""


class PlacesError(MapsServiceError):
    """Raised when a Places nearby search fails"""


class DirectionsError(MapsServiceError):
    """Raised when the Directions API fails or returns no route"""
