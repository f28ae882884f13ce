"""Map data shared by the map decoder and the tile raster resolver."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple
import logging

import numpy as np

from .constants import (
    DEFAULT_MAP_LAYERS, DEFAULT_MAP_SIZE, DEFAULT_TILE_ID,
    MAX_MAP_DIMENSION, MIN_MAP_HEIGHT, MIN_MAP_WIDTH,
)

logger = logging.getLogger(__name__)

PASSABLE = 1

CHANNEL_TILES = "tiles"
CHANNEL_ZONES = "zones"
CHANNEL_NPCS = "npcs"


def grid_bytes(width: int, height: int, layer_count: int) -> int:
    """Bytes held by the int32 layer grids plus the flat tiles and passability arrays."""
    return width * height * (layer_count + 2) * 4


@dataclass
class NpcPlacement:
    """NPC instance placed on a map."""
    x: int
    y: int
    picture: int
    movement_type: int
    palette: int = 0
    movement_speed: int = 0
    script: int = 0
    active: bool = True

    def to_dict(self) -> Dict[str, int]:
        return {
            'x': self.x,
            'y': self.y,
            'picture': self.picture,
            'palette': self.palette,
            'movement_type': self.movement_type,
            'movement_speed': self.movement_speed,
            'script': self.script,
        }


@dataclass
class MapEvent:
    id: int
    x: int
    y: int
    trigger: int
    script: int

    def to_dict(self) -> Dict[str, int]:
        return {'id': self.id, 'x': self.x, 'y': self.y, 'trigger': self.trigger, 'script': self.script}


@dataclass
class MapData:
    """A decoded map.

    ``layers`` holds ``layer_count`` int32 grids of shape (height, width).
    ``tiles`` is a flat copy of layer 0 and ``passability`` is flat with
    1 meaning passable; both have exactly ``width * height`` cells.
    Any change of dimensions goes through ``resize`` so that every
    dependent array is reallocated together.
    """
    width: int = DEFAULT_MAP_SIZE
    height: int = DEFAULT_MAP_SIZE
    layer_count: int = DEFAULT_MAP_LAYERS
    background: int = 0
    music: int = 0
    tileset_id: int = 0
    layers: List[np.ndarray] = field(default_factory=list)
    tiles: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))
    passability: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))
    npcs: List[NpcPlacement] = field(default_factory=list)
    events: List[MapEvent] = field(default_factory=list)
    doors: List[Tuple[int, int]] = field(default_factory=list)
    defaulted_channels: List[str] = field(default_factory=list)

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    @property
    def grid_bytes(self) -> int:
        return grid_bytes(self.width, self.height, self.layer_count)

    def allocate(self, fill: int = DEFAULT_TILE_ID) -> None:
        """(Re)allocate every grid at the current dimensions."""
        shape = (self.height, self.width)
        self.layers = [np.full(shape, fill, dtype=np.int32) for _ in range(self.layer_count)]
        self.passability = np.full(self.cell_count, PASSABLE, dtype=np.int32)
        self.sync_tiles()

    def resize(self, width: int, height: int) -> None:
        """Change dimensions and reallocate all dependent arrays."""
        logger.info(f"Resizing map from {self.width}x{self.height} to {width}x{height}")
        self.width = width
        self.height = height
        self.allocate()

    def sync_tiles(self) -> None:
        """Refresh the flat ``tiles`` array from layer 0."""
        if self.layers:
            self.tiles = self.layers[0].reshape(-1).copy()
        else:
            self.tiles = np.full(self.cell_count, DEFAULT_TILE_ID, dtype=np.int32)

    def mark_defaulted(self, channel: str) -> None:
        if channel not in self.defaulted_channels:
            self.defaulted_channels.append(channel)

    def clear_defaulted(self, channel: str) -> None:
        if channel in self.defaulted_channels:
            self.defaulted_channels.remove(channel)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def to_dict(self) -> Dict[str, Any]:
        return {
            'width': self.width,
            'height': self.height,
            'layer_count': self.layer_count,
            'background': self.background,
            'music': self.music,
            'tileset_id': self.tileset_id,
            'distinct_tiles': int(np.unique(self.tiles).size) if self.tiles.size else 0,
            'passable_cells': int(np.count_nonzero(self.passability)),
            'npcs': [npc.to_dict() for npc in self.npcs],
            'events': [event.to_dict() for event in self.events],
            'defaulted_channels': list(self.defaulted_channels),
        }


def clamp_dimensions(width: int, height: int) -> Tuple[int, int]:
    """Repair header dimensions: impossible values become the default
    size, then each side is raised to the minimum map size."""
    if width <= 0 or width > MAX_MAP_DIMENSION:
        logger.warning(f"Invalid map width {width}, using default {DEFAULT_MAP_SIZE}")
        width = DEFAULT_MAP_SIZE
    if height <= 0 or height > MAX_MAP_DIMENSION:
        logger.warning(f"Invalid map height {height}, using default {DEFAULT_MAP_SIZE}")
        height = DEFAULT_MAP_SIZE
    return max(width, MIN_MAP_WIDTH), max(height, MIN_MAP_HEIGHT)
