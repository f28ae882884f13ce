"""Map records (maps.reld / .MAP / .DT6)."""
from dataclasses import replace
from typing import List, Optional
import logging
import struct

import numpy as np

from .base import DecodeContext, RecordDecoder
from .common import read_count
from .reld import ReldBlock
from ..constants import (
    DEFAULT_MAP_LAYERS, DEFAULT_MAP_SIZE, MAP_HEADER_STRIDES, MAX_LEGACY_MAPS,
    MAX_MAP_DIMENSION, MIN_MAP_HEIGHT, MIN_MAP_WIDTH,
)
from ..cursor import ByteCursor
from ..errors import MalformedRecordError
from ..models import MapData, MapEvent, NpcPlacement, clamp_dimensions
from ..tiles import TileFormatResolver

logger = logging.getLogger(__name__)

# Header fields in file order with their defaults; a field is present
# only when the header stride reaches past it.
HEADER_FIELDS = (
    ('width', DEFAULT_MAP_SIZE),
    ('height', DEFAULT_MAP_SIZE),
    ('layer_count', DEFAULT_MAP_LAYERS),
    ('background', 0),
    ('music', 0),
    ('tileset_id', 0),
)
SNIFF_MAPS = 3


def sniff_header_stride(data: bytes) -> Optional[int]:
    """Find the legacy map header size.

    The first candidate that divides the blob into 1..1000 headers whose
    first three carry plausible int16 dimensions wins.
    """
    for stride in MAP_HEADER_STRIDES:
        if len(data) < stride or len(data) % stride:
            continue
        count = len(data) // stride
        if not 0 < count <= MAX_LEGACY_MAPS:
            continue
        plausible = True
        for i in range(min(SNIFF_MAPS, count)):
            width, height = struct.unpack_from('<hh', data, i * stride)
            if not (MIN_MAP_WIDTH <= width <= MAX_MAP_DIMENSION
                    and MIN_MAP_HEIGHT <= height <= MAX_MAP_DIMENSION):
                plausible = False
                break
        if plausible:
            return stride
    return None


def _npc_from_block(cur: ByteCursor) -> NpcPlacement:
    x, y, picture, palette, movement_type, movement_speed, script = cur.read_i32_array(7)
    return NpcPlacement(
        x=x, y=y, picture=picture, movement_type=movement_type,
        palette=palette, movement_speed=movement_speed, script=script,
    )


class MapDecoder(RecordDecoder):
    """Map decoder.

    Tagged ``MAP `` blocks carry the full grids. Legacy map files only
    hold a header per map; the grids live in separate per-map lumps
    that TileFormatResolver decodes.
    """

    domain = "maps"
    modern_name = "maps.reld"
    legacy_extensions = ("MAP", "DT6")
    block_tag = b'MAP '

    def parse_block(self, block: ReldBlock, context: DecodeContext) -> MapData:
        cur = block.cursor
        limits = context.limits
        width, height, layer_count, background, music, tileset_id = cur.read_i32_array(6)
        if not (0 < width <= MAX_MAP_DIMENSION and 0 < height <= MAX_MAP_DIMENSION):
            raise MalformedRecordError(f"Invalid map dimensions {width}x{height}")
        if not 0 <= layer_count <= limits.max_map_layers:
            raise MalformedRecordError(f"Invalid map layer count {layer_count}")

        cells = width * height
        needed = layer_count * cells * 4 + cells
        if cells > limits.max_map_cells or needed > cur.remaining:
            raise MalformedRecordError(
                f"Map {width}x{height} with {layer_count} layers needs {needed} bytes, "
                f"{cur.remaining} available"
            )

        map_data = MapData(
            width=width, height=height, layer_count=layer_count,
            background=background, music=music, tileset_id=tileset_id,
        )
        map_data.layers = [
            np.frombuffer(cur.read_bytes(cells * 4), dtype='<i4').astype(np.int32).reshape(height, width)
            for _ in range(layer_count)
        ]
        passable = np.frombuffer(cur.read_bytes(cells), dtype=np.uint8)
        map_data.passability = (passable != 0).astype(np.int32)
        map_data.sync_tiles()

        limit = limits.max_list_entries
        map_data.npcs = [_npc_from_block(cur) for _ in range(read_count(cur, limit, "NPC"))]
        map_data.events = [
            MapEvent(*cur.read_i32_array(5)) for _ in range(read_count(cur, limit, "event"))
        ]
        return map_data

    def parse_fixed(self, data: bytes, context: DecodeContext) -> List[MapData]:
        stride = sniff_header_stride(data)
        if stride is None:
            logger.warning(f"No plausible map header size for {len(data)} bytes of map data")
            return []

        count = len(data) // stride
        logger.info(f"Parsing {count} maps from old binary format with header size {stride}")
        limits = context.limits
        budget = limits.max_total_map_bytes
        maps = []
        for i in range(count):
            map_limits = replace(limits, max_map_bytes=max(0, min(limits.max_map_bytes, budget)))
            map_data = self.parse_header(data[i * stride:(i + 1) * stride], context, map_limits.max_map_bytes)
            TileFormatResolver(map_limits).resolve(map_data, i, context.store, context.project_name)
            budget -= map_data.grid_bytes
            maps.append(map_data)
        return maps

    def parse_header(self, window: bytes, context: DecodeContext,
                     max_bytes: Optional[int] = None) -> MapData:
        """Read one legacy header and allocate its grids.

        Dimensions or layer counts that cannot be honored within the
        limits fall back to the defaults, so every map gets grids.
        """
        limits = context.limits
        if max_bytes is None:
            max_bytes = limits.max_map_bytes
        map_data = MapData()
        for i, (name, default) in enumerate(HEADER_FIELDS):
            offset = i * 2
            value = struct.unpack_from('<h', window, offset)[0] if offset + 2 <= len(window) else default
            setattr(map_data, name, value)

        map_data.width, map_data.height = clamp_dimensions(map_data.width, map_data.height)
        if map_data.cell_count > limits.max_map_cells:
            logger.warning(f"Map {map_data.width}x{map_data.height} exceeds the cell limit, using defaults")
            map_data.width = map_data.height = DEFAULT_MAP_SIZE
        if not 0 < map_data.layer_count <= limits.max_map_layers:
            logger.warning(f"Invalid layer count {map_data.layer_count}, using {DEFAULT_MAP_LAYERS}")
            map_data.layer_count = DEFAULT_MAP_LAYERS
        if map_data.grid_bytes > max_bytes:
            logger.warning(
                f"Map {map_data.width}x{map_data.height} with {map_data.layer_count} layers needs "
                f"{map_data.grid_bytes} bytes of grids, limit {max_bytes}; using defaults"
            )
            map_data.width = map_data.height = DEFAULT_MAP_SIZE
            map_data.layer_count = DEFAULT_MAP_LAYERS
        map_data.allocate()
        return map_data
