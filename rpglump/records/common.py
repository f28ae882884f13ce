"""Shared record structures and helpers."""
from dataclasses import dataclass, asdict
from enum import IntEnum
from typing import Any, Dict, List, Tuple, Type, TypeVar, Union

from construct import Int16sl, Int32sl, Struct

from ..cursor import ByteCursor
from ..errors import MalformedRecordError

E = TypeVar('E', bound=IntEnum)

XYPair = Tuple[int, int]


class EnemyBehavior(IntEnum):
    NORMAL = 0
    AGGRESSIVE = 1
    DEFENSIVE = 2
    FLEE = 3
    RANDOM = 4


class ItemType(IntEnum):
    NONE = 0
    WEAPON = 1
    ARMOR = 2
    SHIELD = 3
    HELMET = 4
    ACCESSORY = 5
    CONSUMABLE = 6
    KEY = 7
    MATERIAL = 8


class ItemEffect(IntEnum):
    NONE = 0
    HEAL = 1
    DAMAGE = 2
    STATUS = 3
    STAT_BOOST = 4
    SPECIAL = 5


class SpellType(IntEnum):
    NORMAL = 0
    HEALING = 1
    STATUS = 2
    ELEMENTAL = 3
    SUMMON = 4
    TRANSFORM = 5


class TargetType(IntEnum):
    NONE = 0
    SELF = 1
    ALLY = 2
    ENEMY = 3
    ALL_ALLIES = 4
    ALL_ENEMIES = 5
    RANDOM_ENEMY = 6
    RANDOM_ALLY = 7


class SpellEffect(IntEnum):
    NONE = 0
    DAMAGE = 1
    HEAL = 2
    STATUS = 3
    TRANSFORM = 4
    SUMMON = 5
    TELEPORT = 6
    ITEM = 7


class ScriptType(IntEnum):
    NONE = 0
    MAP = 1
    BATTLE = 2
    MENU = 3
    GLOBAL = 4


class TextureFormat(IntEnum):
    NONE = 0
    RGB = 1
    RGBA = 2
    INDEXED = 3
    GRAYSCALE = 4


class AudioType(IntEnum):
    NONE = 0
    MUSIC = 1
    SOUND_EFFECT = 2
    VOICE = 3


class AudioFormat(IntEnum):
    NONE = 0
    PCM = 1
    ADPCM = 2
    MP3 = 3
    OGG = 4


class Direction(IntEnum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3


def to_enum(enum_cls: Type[E], value: int) -> Union[E, int]:
    """Map a raw value onto ``enum_cls``, keeping unknown values as ints."""
    try:
        return enum_cls(value)
    except ValueError:
        return value


# Eight stats stored as 32-bit (tagged and most fixed layouts) or 16-bit values
STATS_I32 = Struct(
    "hp" / Int32sl,
    "mp" / Int32sl,
    "attack" / Int32sl,
    "defense" / Int32sl,
    "speed" / Int32sl,
    "magic" / Int32sl,
    "magic_def" / Int32sl,
    "luck" / Int32sl,
)

STATS_I16 = Struct(
    "hp" / Int16sl,
    "mp" / Int16sl,
    "attack" / Int16sl,
    "defense" / Int16sl,
    "speed" / Int16sl,
    "magic" / Int16sl,
    "magic_def" / Int16sl,
    "luck" / Int16sl,
)


@dataclass
class Stats:
    """Eight battle stats shared by heroes, enemies, items and saves."""
    hp: int = 0
    mp: int = 0
    attack: int = 0
    defense: int = 0
    speed: int = 0
    magic: int = 0
    magic_def: int = 0
    luck: int = 0

    @classmethod
    def read(cls, cursor: ByteCursor) -> 'Stats':
        """Read eight i32 stats from a tagged block."""
        return cls(*cursor.read_i32_array(8))

    @classmethod
    def from_container(cls, parsed: Any) -> 'Stats':
        """Build from a parsed STATS_I32/STATS_I16 container."""
        return cls(
            hp=parsed.hp,
            mp=parsed.mp,
            attack=parsed.attack,
            defense=parsed.defense,
            speed=parsed.speed,
            magic=parsed.magic,
            magic_def=parsed.magic_def,
            luck=parsed.luck,
        )

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def read_prefixed_string(cursor: ByteCursor) -> str:
    """Read an i32 length followed by that many bytes of ASCII text."""
    length = cursor.read_i32()
    return cursor.read_fixed_string(length)


def read_count(cursor: ByteCursor, limit: int, what: str) -> int:
    """Read an i32 element count and check it against ``limit``."""
    count = cursor.read_i32()
    if count < 0 or count > limit:
        raise MalformedRecordError(f"Invalid {what} count {count} at offset {cursor.position - 4}")
    return count


def read_metadata(cursor: ByteCursor, limit: int) -> Dict[str, str]:
    """Read a counted list of (key length, key, value length, value)."""
    metadata: Dict[str, str] = {}
    for _ in range(read_count(cursor, limit, "metadata")):
        key = read_prefixed_string(cursor)
        metadata[key] = read_prefixed_string(cursor)
    return metadata


def enum_value(value: Union[IntEnum, int]) -> Union[str, int]:
    """JSON-friendly form of a possibly-unknown enum value."""
    return value.name if isinstance(value, IntEnum) else value


def xy_list(pairs: List[XYPair]) -> List[Dict[str, int]]:
    return [{'x': x, 'y': y} for x, y in pairs]
