"""Raster encodings for per-map tile and zone lumps."""
from typing import Tuple
import logging
import struct

import numpy as np

from ..constants import (
    BSAVE_HEADER_SIZE, BSAVE_MAGIC, COMPACT_HEADER_SIZE, DEFAULT_LIMITS,
    MAX_MAP_DIMENSION, MIN_MAP_HEIGHT, MIN_MAP_WIDTH, DecoderLimits,
)
from ..errors import DimensionOutOfRangeError
from ..models import MapData, grid_bytes

logger = logging.getLogger(__name__)

BSAVE_DIMENSIONS_OFFSET = 8


def check_dimensions(width: int, height: int, limits: DecoderLimits = DEFAULT_LIMITS) -> None:
    """Raise DimensionOutOfRangeError unless width x height is a legal raster."""
    if not (MIN_MAP_WIDTH <= width <= MAX_MAP_DIMENSION
            and MIN_MAP_HEIGHT <= height <= MAX_MAP_DIMENSION):
        raise DimensionOutOfRangeError(width, height)
    if width * height > limits.max_map_cells:
        raise DimensionOutOfRangeError(width, height)


def read_bsave_dimensions(data: bytes) -> Tuple[int, int]:
    return struct.unpack_from('<hh', data, BSAVE_DIMENSIONS_OFFSET)


def byte_grid(data: bytes, offset: int, width: int, height: int) -> np.ndarray:
    """View ``width * height`` bytes at ``offset`` as a row-major grid."""
    return np.frombuffer(data, dtype=np.uint8, count=width * height, offset=offset).reshape(height, width)


class RasterStrategy:
    """One candidate encoding for a raster lump.

    ``validate`` decides whether the blob is in this encoding and may
    raise DimensionOutOfRangeError to reject it; ``decode`` writes the
    raster into the map, resizing the map first when the raster says so.
    """

    name = ""

    def __init__(self, limits: DecoderLimits = DEFAULT_LIMITS):
        self.limits = limits

    def validate(self, map_data: MapData, data: bytes) -> bool:
        raise NotImplementedError("Raster strategies must implement validate()")

    def decode(self, map_data: MapData, data: bytes) -> None:
        raise NotImplementedError("Raster strategies must implement decode()")

    def check_resize(self, map_data: MapData, width: int, height: int) -> None:
        """Reject a resize whose grids would exceed ``max_map_bytes``."""
        if (map_data.width, map_data.height) == (width, height):
            return
        if grid_bytes(width, height, map_data.layer_count) > self.limits.max_map_bytes:
            raise DimensionOutOfRangeError(width, height)

    def adopt_dimensions(self, map_data: MapData, width: int, height: int) -> None:
        """Make the raster's dimensions authoritative for the map."""
        if (map_data.width, map_data.height) != (width, height):
            map_data.resize(width, height)


class TaggedRaster(RasterStrategy):
    """BSAVE raster: 0xFD prefix, int16 width/height at 8 and 10, bytes from 11."""

    name = "bsave"

    def header(self, data: bytes) -> Tuple[int, int, int]:
        width, height = read_bsave_dimensions(data)
        check_dimensions(width, height, self.limits)
        layers = (len(data) - BSAVE_HEADER_SIZE) // (width * height)
        return width, height, layers

    def validate(self, map_data: MapData, data: bytes) -> bool:
        # height is read as a 16-bit value at offset 10
        if len(data) < BSAVE_HEADER_SIZE + 1 or data[0] != BSAVE_MAGIC:
            return False
        width, height, layers = self.header(data)
        self.check_resize(map_data, width, height)
        return layers > 0

    def decode(self, map_data: MapData, data: bytes) -> None:
        width, height, layers = self.header(data)
        self.adopt_dimensions(map_data, width, height)
        cells = width * height
        for layer in range(min(layers, map_data.layer_count)):
            offset = BSAVE_HEADER_SIZE + layer * cells
            map_data.layers[layer][:, :] = byte_grid(data, offset, width, height)
        map_data.sync_tiles()
        logger.debug(f"Loaded {min(layers, map_data.layer_count)} of {layers} BSAVE layers ({width}x{height})")


class HeadlessRaster(RasterStrategy):
    """Bare bytes at the map's current dimensions."""

    name = "raw"

    def validate(self, map_data: MapData, data: bytes) -> bool:
        return len(data) >= map_data.cell_count

    def decode(self, map_data: MapData, data: bytes) -> None:
        if map_data.layers:
            map_data.layers[0][:, :] = byte_grid(data, 0, map_data.width, map_data.height)
        map_data.sync_tiles()


class CompactHeaderRaster(RasterStrategy):
    """uint16 width/height then bytes; fills layer 0 as far as the data reaches."""

    name = "compact"

    def header(self, data: bytes) -> Tuple[int, int]:
        width, height = struct.unpack_from('<HH', data, 0)
        check_dimensions(width, height, self.limits)
        return width, height

    def validate(self, map_data: MapData, data: bytes) -> bool:
        if len(data) < COMPACT_HEADER_SIZE:
            return False
        width, height = self.header(data)
        self.check_resize(map_data, width, height)
        return True

    def decode(self, map_data: MapData, data: bytes) -> None:
        width, height = self.header(data)
        self.adopt_dimensions(map_data, width, height)
        payload = data[COMPACT_HEADER_SIZE:COMPACT_HEADER_SIZE + width * height]
        if map_data.layers:
            flat = map_data.layers[0].reshape(-1)
            flat[:len(payload)] = np.frombuffer(payload, dtype=np.uint8)
        map_data.sync_tiles()


def zones_to_passability(zones: np.ndarray) -> np.ndarray:
    """Zone id 0 is passable (1); every other zone blocks (0)."""
    return (zones.reshape(-1) == 0).astype(np.int32)


class TaggedZoneRaster(RasterStrategy):
    """BSAVE zone raster; needs at least width*height bytes after the header."""

    name = "bsave-zones"

    def validate(self, map_data: MapData, data: bytes) -> bool:
        if len(data) < BSAVE_HEADER_SIZE + 1 or data[0] != BSAVE_MAGIC:
            return False
        width, height = read_bsave_dimensions(data)
        check_dimensions(width, height, self.limits)
        self.check_resize(map_data, width, height)
        return len(data) - BSAVE_HEADER_SIZE >= width * height

    def decode(self, map_data: MapData, data: bytes) -> None:
        width, height = read_bsave_dimensions(data)
        self.adopt_dimensions(map_data, width, height)
        map_data.passability = zones_to_passability(byte_grid(data, BSAVE_HEADER_SIZE, width, height))


class HeadlessZoneRaster(RasterStrategy):
    name = "raw-zones"

    def validate(self, map_data: MapData, data: bytes) -> bool:
        return len(data) >= map_data.cell_count

    def decode(self, map_data: MapData, data: bytes) -> None:
        zones = byte_grid(data, 0, map_data.width, map_data.height)
        map_data.passability = zones_to_passability(zones)
