"""Save-slot records (saves.reld / .SAV)."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union
import logging

from construct import Bytes, Int32sl, Padding, Struct

from .base import DecodeContext, RecordDecoder
from .common import STATS_I32, Direction, Stats, XYPair, enum_value, read_count, to_enum
from .reld import ReldBlock
from ..constants import SAVE_STRIDE
from ..cursor import ByteCursor, decode_fixed_string

logger = logging.getLogger(__name__)

NAME_SIZE = 32
TICKS_MASK = 0x3FFFFFFFFFFFFFFF
EPOCH = datetime(1, 1, 1)

LEGACY_SAVE_BODY = Struct(
    "id" / Int32sl,
    "name" / Bytes(NAME_SIZE),
    "game_version" / Int32sl,
    "player_name" / Bytes(NAME_SIZE),
    "level" / Int32sl,
    "experience" / Int32sl,
    "gold" / Int32sl,
    "stats" / STATS_I32,
    "x" / Int32sl,
    "y" / Int32sl,
    "map_id" / Int32sl,
    "direction" / Int32sl,
)
LEGACY_SAVE = Struct(
    "body" / LEGACY_SAVE_BODY,
    Padding(SAVE_STRIDE - LEGACY_SAVE_BODY.sizeof()),
)


def ticks_to_datetime(value: int) -> Optional[datetime]:
    """Convert a 64-bit tick timestamp (100ns units since 0001-01-01).

    The top two bits hold a time-zone kind flag and are ignored.
    Returns None when the ticks fall outside the datetime range.
    """
    ticks = value & TICKS_MASK
    try:
        return EPOCH + timedelta(microseconds=ticks // 10)
    except OverflowError:
        logger.warning(f"Save timestamp {value:#x} is out of range")
        return None


@dataclass
class InventoryEntry:
    item_id: int
    quantity: int
    equipped: bool


@dataclass
class PartyMember:
    name: str
    level: int
    experience: int
    stats: Stats


@dataclass
class PlayerRecord:
    name: str = ""
    level: int = 0
    experience: int = 0
    gold: int = 0
    stats: Stats = field(default_factory=Stats)
    position: XYPair = (0, 0)
    map_id: int = 0
    direction: Union[Direction, int] = Direction.NORTH
    inventory: List[InventoryEntry] = field(default_factory=list)
    party: List[PartyMember] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'level': self.level,
            'experience': self.experience,
            'gold': self.gold,
            'stats': self.stats.to_dict(),
            'position': {'x': self.position[0], 'y': self.position[1]},
            'map_id': self.map_id,
            'direction': enum_value(self.direction),
            'inventory': [
                {'item_id': e.item_id, 'quantity': e.quantity, 'equipped': e.equipped}
                for e in self.inventory
            ],
            'party': [member.name for member in self.party],
        }


@dataclass
class SaveRecord:
    id: int = 0
    name: str = ""
    timestamp: Optional[datetime] = None
    game_version: int = 0
    player: PlayerRecord = field(default_factory=PlayerRecord)
    game_flags: Dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
            'game_version': self.game_version,
            'player': self.player.to_dict(),
            'game_flags': dict(self.game_flags),
        }


def _read_player(cur: ByteCursor, limit: int) -> PlayerRecord:
    player = PlayerRecord(name=cur.read_fixed_string(NAME_SIZE))
    player.level = cur.read_i32()
    player.experience = cur.read_i32()
    player.gold = cur.read_i32()
    player.stats = Stats.read(cur)
    player.position = (cur.read_i32(), cur.read_i32())
    player.map_id = cur.read_i32()
    player.direction = to_enum(Direction, cur.read_i32())

    for _ in range(read_count(cur, limit, "inventory")):
        player.inventory.append(InventoryEntry(
            item_id=cur.read_i32(),
            quantity=cur.read_i32(),
            equipped=cur.read_bool(),
        ))

    for _ in range(read_count(cur, limit, "party member")):
        player.party.append(PartyMember(
            name=cur.read_fixed_string(NAME_SIZE),
            level=cur.read_i32(),
            experience=cur.read_i32(),
            stats=Stats.read(cur),
        ))
    return player


class SaveDecoder(RecordDecoder):
    """Save-slot decoder.

    The legacy 1024-byte slot holds the header and the player scalars;
    it has no timestamp, inventory, party or flags.
    """

    domain = "saves"
    modern_name = "saves.reld"
    legacy_extensions = ("SAV",)
    block_tag = b'SAVE'
    stride = SAVE_STRIDE
    legacy_struct = LEGACY_SAVE

    def parse_block(self, block: ReldBlock, context: DecodeContext) -> SaveRecord:
        cur = block.cursor
        limit = context.limits.max_list_entries
        save = SaveRecord(id=cur.read_i32(), name=cur.read_fixed_string(NAME_SIZE))
        save.timestamp = ticks_to_datetime(cur.read_i64())
        save.game_version = cur.read_i32()
        save.player = _read_player(cur, limit)
        for _ in range(read_count(cur, limit, "game flag")):
            flag = cur.read_fixed_string(NAME_SIZE)
            save.game_flags[flag] = cur.read_bool()
        return save

    def parse_record(self, window: bytes, index: int, context: DecodeContext) -> SaveRecord:
        body = self.parse_struct(window).body
        player = PlayerRecord(
            name=decode_fixed_string(body.player_name),
            level=body.level,
            experience=body.experience,
            gold=body.gold,
            stats=Stats.from_container(body.stats),
            position=(body.x, body.y),
            map_id=body.map_id,
            direction=to_enum(Direction, body.direction),
        )
        return SaveRecord(
            id=body.id,
            name=decode_fixed_string(body.name),
            game_version=body.game_version,
            player=player,
        )
