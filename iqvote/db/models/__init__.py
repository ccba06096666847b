from .enums import RegionCode
from .party import Party
from .location import Location

__all__ = [
    "RegionCode",
    "Party", "Location",
]
