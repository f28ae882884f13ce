"""Resolves the per-map tile, zone and NPC lumps of a legacy map."""
from typing import Optional, Sequence
import logging

from .npcs import parse_npc_placements
from .strategies import (
    CompactHeaderRaster, HeadlessRaster, HeadlessZoneRaster, RasterStrategy,
    TaggedRaster, TaggedZoneRaster,
)
from ..constants import DEFAULT_LIMITS, DecoderLimits
from ..container.store import LumpStore
from ..errors import DimensionOutOfRangeError
from ..models import CHANNEL_NPCS, CHANNEL_TILES, CHANNEL_ZONES, MapData

logger = logging.getLogger(__name__)


def map_lump_name(project_name: str, kind: str, index: int) -> str:
    """Per-map lump name, e.g. ``GAME.E03``."""
    return f"{project_name}.{kind}{index:02d}"


class TileFormatResolver:
    """Tries each raster strategy in order until one validates.

    A channel whose lump is missing, or that no strategy accepts, keeps
    its synthetic defaults and is listed in ``MapData.defaulted_channels``.
    """

    def __init__(self, limits: DecoderLimits = DEFAULT_LIMITS):
        self.limits = limits
        self.tile_strategies = [
            TaggedRaster(limits),
            HeadlessRaster(limits),
            CompactHeaderRaster(limits),
        ]
        self.zone_strategies = [
            TaggedZoneRaster(limits),
            HeadlessZoneRaster(limits),
        ]

    def apply(self, strategies: Sequence[RasterStrategy], map_data: MapData,
              data: bytes) -> Optional[str]:
        """Decode ``data`` with the first strategy that validates it."""
        for strategy in strategies:
            try:
                if not strategy.validate(map_data, data):
                    continue
            except DimensionOutOfRangeError as e:
                logger.debug(f"{strategy.name} rejected raster: {e}")
                continue
            strategy.decode(map_data, data)
            return strategy.name
        return None

    def resolve(self, map_data: MapData, index: int, store: LumpStore, project_name: str) -> MapData:
        tile_name = map_lump_name(project_name, "E", index)
        tile_data = store.get(tile_name)
        if tile_data is None:
            logger.warning(f"No tile data found for map {index} in lump {tile_name}")
            map_data.mark_defaulted(CHANNEL_TILES)
        else:
            used = self.apply(self.tile_strategies, map_data, tile_data)
            if used is None:
                logger.warning(f"Failed to parse tile data in {tile_name} in any known format")
                map_data.mark_defaulted(CHANNEL_TILES)
            else:
                logger.debug(f"Parsed {tile_name} as {used} raster")

        zone_name = map_lump_name(project_name, "Z", index)
        zone_data = store.get(zone_name)
        if zone_data is None:
            map_data.mark_defaulted(CHANNEL_ZONES)
        else:
            size = (map_data.width, map_data.height)
            used = self.apply(self.zone_strategies, map_data, zone_data)
            if used is None:
                logger.warning(f"Failed to parse zone data in {zone_name} in any known format")
                map_data.mark_defaulted(CHANNEL_ZONES)
            elif size != (map_data.width, map_data.height):
                # the zone raster resized the map and reset its tiles
                map_data.mark_defaulted(CHANNEL_TILES)

        npc_name = map_lump_name(project_name, "L", index)
        npc_data = store.get(npc_name)
        if npc_data is None:
            map_data.mark_defaulted(CHANNEL_NPCS)
        else:
            map_data.npcs = parse_npc_placements(map_data, npc_data)

        logger.info(
            f"Map {index}: {map_data.width}x{map_data.height}, "
            f"{len(map_data.npcs)} NPCs, defaulted: {map_data.defaulted_channels or 'none'}"
        )
        return map_data
