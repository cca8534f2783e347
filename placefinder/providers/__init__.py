from placefinder.providers.base import FindPlaceRequest, PlaceMatch
from placefinder.providers.device import DeviceFindPlaceRequest, DevicePlaceMatch
from placefinder.providers.google import GoogleFindPlaceRequest, GooglePlaceMatch

__all__ = [
    "DeviceFindPlaceRequest",
    "DevicePlaceMatch",
    "FindPlaceRequest",
    "GoogleFindPlaceRequest",
    "GooglePlaceMatch",
    "PlaceMatch",
]
