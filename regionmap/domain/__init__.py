"""
Domain models package.

Immutable value types shared by the interaction engine: map points, the
region hierarchy, selection records and zones.
"""

from regionmap.domain.geometry import MapPoint, simplify, perpendicular_distance
from regionmap.domain.regions import Region, SubRegion, ViewContext
from regionmap.domain.selection import SelectionRecord, SelectionSnapshot
from regionmap.domain.zones import Zone, ZoneFormatError

__all__ = [
    'MapPoint',
    'simplify',
    'perpendicular_distance',
    'Region',
    'SubRegion',
    'ViewContext',
    'SelectionRecord',
    'SelectionSnapshot',
    'Zone',
    'ZoneFormatError',
]
