from .npcs import parse_npc_placements
from .resolver import TileFormatResolver, map_lump_name
from .strategies import (
    CompactHeaderRaster, HeadlessRaster, HeadlessZoneRaster, RasterStrategy,
    TaggedRaster, TaggedZoneRaster, check_dimensions,
)

__all__ = [
    'TileFormatResolver',
    'map_lump_name',
    'parse_npc_placements',
    'RasterStrategy',
    'TaggedRaster',
    'HeadlessRaster',
    'CompactHeaderRaster',
    'TaggedZoneRaster',
    'HeadlessZoneRaster',
    'check_dimensions',
]
