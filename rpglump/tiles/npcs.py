"""NPC placement lumps (.L<NN>)."""
from typing import List
import logging

from construct import Array, Int16sl, Struct

from ..constants import BSAVE_HEADER_SIZE, MAX_NPCS_PER_MAP, NPC_ENTRY_SIZE
from ..models import MapData, NpcPlacement

logger = logging.getLogger(__name__)

NPC_ENTRY = Struct(
    "x" / Int16sl,
    "y" / Int16sl,
    "picture" / Int16sl,
    "movement_type" / Int16sl,
)


def parse_npc_placements(map_data: MapData, data: bytes) -> List[NpcPlacement]:
    """Read up to 300 placements after the 11-byte prefix; out-of-bounds
    placements are dropped."""
    count = min(MAX_NPCS_PER_MAP, max(0, (len(data) - BSAVE_HEADER_SIZE) // NPC_ENTRY_SIZE))
    if count == 0:
        return []
    entries = Array(count, NPC_ENTRY).parse(data[BSAVE_HEADER_SIZE:])
    npcs = [
        NpcPlacement(x=e.x, y=e.y, picture=e.picture, movement_type=e.movement_type)
        for e in entries
        if map_data.in_bounds(e.x, e.y)
    ]
    logger.debug(f"Kept {len(npcs)} of {count} NPC placements")
    return npcs
