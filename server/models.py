from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol, Union


# Address types that pin a waypoint to one exact location
PRECISE_ADDRESS_TYPES = ('street_address', 'premise', 'subpremise')

# Prefix the Directions API understands for place identifiers in waypoints
PLACE_ID_PREFIX = 'place_id:'


class PlaceType(str, Enum):
    """Place types accepted by the Places nearby search ``type`` filter"""

    ACCOUNTING = 'accounting'
    AIRPORT = 'airport'
    AMUSEMENT_PARK = 'amusement_park'
    AQUARIUM = 'aquarium'
    ART_GALLERY = 'art_gallery'
    ATM = 'atm'
    BAKERY = 'bakery'
    BANK = 'bank'
    BAR = 'bar'
    BEAUTY_SALON = 'beauty_salon'
    BICYCLE_STORE = 'bicycle_store'
    BOOK_STORE = 'book_store'
    BOWLING_ALLEY = 'bowling_alley'
    BUS_STATION = 'bus_station'
    CAFE = 'cafe'
    CAMPGROUND = 'campground'
    CAR_DEALER = 'car_dealer'
    CAR_RENTAL = 'car_rental'
    CAR_REPAIR = 'car_repair'
    CAR_WASH = 'car_wash'
    CASINO = 'casino'
    CEMETERY = 'cemetery'
    CHURCH = 'church'
    CITY_HALL = 'city_hall'
    CLOTHING_STORE = 'clothing_store'
    CONVENIENCE_STORE = 'convenience_store'
    COURTHOUSE = 'courthouse'
    DENTIST = 'dentist'
    DEPARTMENT_STORE = 'department_store'
    DOCTOR = 'doctor'
    DRUGSTORE = 'drugstore'
    ELECTRICIAN = 'electrician'
    ELECTRONICS_STORE = 'electronics_store'
    EMBASSY = 'embassy'
    FIRE_STATION = 'fire_station'
    FLORIST = 'florist'
    FUNERAL_HOME = 'funeral_home'
    FURNITURE_STORE = 'furniture_store'
    GAS_STATION = 'gas_station'
    GYM = 'gym'
    HAIR_CARE = 'hair_care'
    HARDWARE_STORE = 'hardware_store'
    HINDU_TEMPLE = 'hindu_temple'
    HOME_GOODS_STORE = 'home_goods_store'
    HOSPITAL = 'hospital'
    INSURANCE_AGENCY = 'insurance_agency'
    JEWELRY_STORE = 'jewelry_store'
    LAUNDRY = 'laundry'
    LAWYER = 'lawyer'
    LIBRARY = 'library'
    LIGHT_RAIL_STATION = 'light_rail_station'
    LIQUOR_STORE = 'liquor_store'
    LOCAL_GOVERNMENT_OFFICE = 'local_government_office'
    LOCKSMITH = 'locksmith'
    LODGING = 'lodging'
    MEAL_DELIVERY = 'meal_delivery'
    MEAL_TAKEAWAY = 'meal_takeaway'
    MOSQUE = 'mosque'
    MOVIE_RENTAL = 'movie_rental'
    MOVIE_THEATER = 'movie_theater'
    MOVING_COMPANY = 'moving_company'
    MUSEUM = 'museum'
    NIGHT_CLUB = 'night_club'
    PAINTER = 'painter'
    PARK = 'park'
    PARKING = 'parking'
    PET_STORE = 'pet_store'
    PHARMACY = 'pharmacy'
    PHYSIOTHERAPIST = 'physiotherapist'
    PLUMBER = 'plumber'
    POLICE = 'police'
    POST_OFFICE = 'post_office'
    PRIMARY_SCHOOL = 'primary_school'
    REAL_ESTATE_AGENCY = 'real_estate_agency'
    RESTAURANT = 'restaurant'
    ROOFING_CONTRACTOR = 'roofing_contractor'
    RV_PARK = 'rv_park'
    SCHOOL = 'school'
    SECONDARY_SCHOOL = 'secondary_school'
    SHOE_STORE = 'shoe_store'
    SHOPPING_MALL = 'shopping_mall'
    SPA = 'spa'
    STADIUM = 'stadium'
    STORAGE = 'storage'
    STORE = 'store'
    SUBWAY_STATION = 'subway_station'
    SUPERMARKET = 'supermarket'
    SYNAGOGUE = 'synagogue'
    TAXI_STAND = 'taxi_stand'
    TOURIST_ATTRACTION = 'tourist_attraction'
    TRAIN_STATION = 'train_station'
    TRANSIT_STATION = 'transit_station'
    TRAVEL_AGENCY = 'travel_agency'
    UNIVERSITY = 'university'
    VETERINARY_CARE = 'veterinary_care'
    ZOO = 'zoo'

    @classmethod
    def from_text(cls, text: str) -> Optional['PlaceType']:
        """Match free text such as ``"Gas Station"`` to a place type, or None"""
        key = text.strip().lower().replace(' ', '_')
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float

    def as_tuple(self):
        return (self.lat, self.lng)

    def to_dict(self) -> Dict:
        return {'lat': self.lat, 'lng': self.lng}


@dataclass(frozen=True)
class GeocodeResult:
    """First result of a geocoding lookup"""
    coordinate: Coordinate
    address_types: List[str]
    formatted_address: str = ''


@dataclass(frozen=True)
class NearbyPlace:
    """Nearest place returned by a Places nearby search"""
    place_id: str
    name: str = ''
    vicinity: str = ''
    location: Optional[Coordinate] = None


# --- Classified waypoints ---

@dataclass(frozen=True)
class StreetAddress:
    text: str
    coordinate: Coordinate


@dataclass(frozen=True)
class Category:
    text: str
    place_type: PlaceType


@dataclass(frozen=True)
class Unresolved:
    text: str


Waypoint = Union[StreetAddress, Category, Unresolved]


@dataclass
class SeparatedWaypoints:
    """Waypoints split into fixed street addresses and category errands"""
    street_addresses: List[StreetAddress] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    unresolved: List[Unresolved] = field(default_factory=list)

    @property
    def street_address_texts(self) -> List[str]:
        return [waypoint.text for waypoint in self.street_addresses]

    @property
    def place_types(self) -> List[PlaceType]:
        """Distinct place types, in the order they were first requested"""
        seen: List[PlaceType] = []
        for waypoint in self.categories:
            if waypoint.place_type not in seen:
                seen.append(waypoint.place_type)
        return seen


@dataclass(frozen=True)
class Candidate:
    """Nearest match for one (place type, anchor) pair"""
    place_type: PlaceType
    anchor: Coordinate
    place: NearbyPlace
    distance_meters: Optional[float] = None

    @property
    def token(self) -> str:
        return PLACE_ID_PREFIX + self.place.place_id


@dataclass
class OptimizedWaypoints:
    """Winning waypoint list plus the candidates chosen for it"""
    waypoints: List[str]
    chosen: List[Candidate] = field(default_factory=list)
    travel_time_seconds: Optional[int] = None
    combinations_evaluated: int = 0


class MapsClient(Protocol):
    """Geocoding, nearby search and routing capabilities used by the optimizer"""

    def geocode(self, address: str) -> Optional[GeocodeResult]:
        ...

    def search_nearby(self, location: Coordinate, place_type: PlaceType) -> Optional[NearbyPlace]:
        ...

    def get_directions(self, origin: str, destination: str, waypoints: List[str],
                       optimize_waypoints: bool = True) -> List[Dict]:
        ...
