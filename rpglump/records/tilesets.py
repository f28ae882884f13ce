"""Tileset graphics lumps (tilesetNNN.rgfx)."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import logging
import re

from ..constants import DEFAULT_LIMITS, RGFX_MAGIC, DecoderLimits
from ..container.store import LumpStore
from ..cursor import ByteCursor
from ..errors import MalformedRecordError

logger = logging.getLogger(__name__)

MAX_ANIMATIONS = 1000
MAX_FRAMES = 100
MAX_METADATA = 1000
MAX_KEY_LENGTH = 1000
MAX_VALUE_LENGTH = 10000

TILESET_NAME = re.compile(r'^tileset(\d+)\.rgfx$', re.IGNORECASE)


@dataclass
class TileAnimation:
    tile_id: int = 0
    frame_count: int = 0
    frame_delay: int = 0
    frames: List[int] = field(default_factory=list)


@dataclass
class TilesetData:
    id: int
    tile_count: int = 0
    tile_size: int = 0
    has_animations: bool = False
    tile_graphics: List[bytes] = field(default_factory=list)
    palette: bytes = b''
    animations: List[TileAnimation] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'tile_count': self.tile_count,
            'tile_size': self.tile_size,
            'has_animations': self.has_animations,
            'graphics_bytes': sum(len(tile) for tile in self.tile_graphics),
            'palette_bytes': len(self.palette),
            'animations': len(self.animations),
            'metadata': dict(self.metadata),
        }


def tileset_candidate_names(tileset_id: int) -> List[str]:
    names = [f"tileset{tileset_id:03d}.rgfx", f"tileset{tileset_id:02d}.rgfx", f"tileset{tileset_id}.rgfx"]
    return names + [name.upper() for name in names]


def available_tileset_ids(store: LumpStore) -> List[int]:
    """Sorted ids of every ``tileset*.rgfx`` lump at the top level of the store."""
    ids = set()
    for name in store.names():
        match = TILESET_NAME.match(name)
        if match:
            ids.add(int(match.group(1)))
    return sorted(ids)


class TilesetDecoder:
    """Decoder for RGFX tileset lumps.

    Layout: magic, version, tile count, tile size, has-animations byte,
    then size-prefixed tile graphics, a size-prefixed palette, optional
    animations and optional metadata. Trailing sections that are
    missing or implausible decode as empty.
    """

    def __init__(self, limits: DecoderLimits = DEFAULT_LIMITS):
        self.limits = limits

    def find_source(self, store: LumpStore, tileset_id: int) -> Optional[Tuple[str, bytes]]:
        for name in tileset_candidate_names(tileset_id):
            data = store.get(name)
            if data is not None:
                return name, data
        return None

    def decode(self, data: bytes, tileset_id: int) -> TilesetData:
        cur = ByteCursor(data)
        magic = cur.read_bytes(4)
        if magic != RGFX_MAGIC:
            raise MalformedRecordError(f"Invalid tileset magic {magic!r}")
        version = cur.read_i32()

        tileset = TilesetData(id=tileset_id)
        tileset.tile_count = cur.read_i32()
        tileset.tile_size = cur.read_i32()
        tileset.has_animations = cur.read_bool()
        if not 0 <= tileset.tile_count <= self.limits.max_tiles:
            raise MalformedRecordError(f"Invalid tile count {tileset.tile_count}")
        logger.debug(
            f"Tileset {tileset_id}: version {version}, {tileset.tile_count} tiles "
            f"of {tileset.tile_size}px, animations: {tileset.has_animations}"
        )

        tileset.tile_graphics = [self._read_blob(cur, f"tile {i}") for i in range(tileset.tile_count)]
        tileset.palette = self._read_blob(cur, "palette")
        if tileset.has_animations:
            tileset.animations = self._read_animations(cur)
        tileset.metadata = self._read_metadata(cur)
        return tileset

    def _read_blob(self, cur: ByteCursor, what: str) -> bytes:
        """Size-prefixed bytes; a missing or bad size yields empty bytes."""
        if cur.remaining < 4:
            return b''
        size = cur.read_i32()
        if size <= 0 or size > cur.remaining:
            if size:
                logger.warning(f"Invalid {what} size {size}")
            return b''
        return cur.read_bytes(size)

    def _read_animations(self, cur: ByteCursor) -> List[TileAnimation]:
        if cur.remaining < 4:
            return []
        count = cur.read_i32()
        if not 0 < count < MAX_ANIMATIONS:
            logger.warning(f"Invalid animation count {count}")
            return []

        animations = []
        for i in range(count):
            if cur.remaining < 12:
                logger.warning(f"Tileset ended at animation {i}")
                animations.append(TileAnimation())
                continue
            anim = TileAnimation(*cur.read_i32_array(3))
            if 0 < anim.frame_count < MAX_FRAMES and cur.remaining >= anim.frame_count * 4:
                anim.frames = cur.read_i32_array(anim.frame_count)
                animations.append(anim)
            else:
                logger.warning(f"Invalid frame count {anim.frame_count} in animation {i}")
                animations.append(TileAnimation())
        return animations

    def _read_metadata(self, cur: ByteCursor) -> Dict[str, str]:
        metadata: Dict[str, str] = {}
        if cur.remaining < 4:
            return metadata
        count = cur.read_i32()
        if not 0 < count < MAX_METADATA:
            return metadata

        for i in range(count):
            if cur.remaining < 8:
                logger.warning(f"Tileset ended at metadata entry {i}")
                break
            key_length = cur.read_i32()
            value_length = cur.read_i32()
            if not (0 < key_length < MAX_KEY_LENGTH and 0 <= value_length < MAX_VALUE_LENGTH
                    and key_length + value_length <= cur.remaining):
                logger.warning(f"Invalid metadata entry {i}: key={key_length}, value={value_length}")
                break
            key = cur.read_fixed_string(key_length)
            metadata[key] = cur.read_fixed_string(value_length)
        return metadata
