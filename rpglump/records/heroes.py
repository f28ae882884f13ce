"""Hero records (heroes.reld / .HSP / .DT2 / .DT0)."""
from dataclasses import dataclass, field
from typing import Any, Dict, List
import logging

from construct import Array, Bytes, Int16sl, Struct

from .base import DecodeContext, RecordDecoder
from .common import STATS_I16, Stats, XYPair, read_count, read_prefixed_string, xy_list
from .reld import ReldBlock
from ..constants import ELEMENT_COUNT, HERO_STRIDE
from ..cursor import decode_fixed_string

logger = logging.getLogger(__name__)

SPELL_LISTS = 4
SPELLS_PER_LIST = 24

# 256-byte legacy hero record; all values 16-bit
LEGACY_HERO = Struct(
    "name" / Bytes(16),
    "picture" / Int16sl,
    "palette" / Int16sl,
    "walk_sprite" / Int16sl,
    "walk_palette" / Int16sl,
    "default_level" / Int16sl,
    "default_weapon" / Int16sl,
    "stats" / STATS_I16,
    "spell_lists" / Array(SPELL_LISTS, Array(SPELLS_PER_LIST, Int16sl)),
    "portrait" / Int16sl,
    "portrait_palette" / Int16sl,
    "hand_positions" / Array(2, Struct("x" / Int16sl, "y" / Int16sl)),
    "have_tag" / Int16sl,
    "alive_tag" / Int16sl,
    "leader_tag" / Int16sl,
    "active_tag" / Int16sl,
)


@dataclass
class HeroRecord:
    """Single hero definition."""
    name: str = ""
    picture: int = 0
    palette: int = 0
    portrait: int = 0
    portrait_palette: int = 0
    stats: Stats = field(default_factory=Stats)
    level_mp: List[int] = field(default_factory=list)
    elementals: List[float] = field(default_factory=list)
    hand_positions: List[XYPair] = field(default_factory=list)
    # Only present in the legacy layout
    walk_sprite: int = 0
    walk_palette: int = 0
    default_level: int = 0
    default_weapon: int = 0
    spell_lists: List[List[int]] = field(default_factory=list)
    have_tag: int = 0
    alive_tag: int = 0
    leader_tag: int = 0
    active_tag: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'picture': self.picture,
            'palette': self.palette,
            'portrait': self.portrait,
            'portrait_palette': self.portrait_palette,
            'stats': self.stats.to_dict(),
            'level_mp': list(self.level_mp),
            'elementals': list(self.elementals),
            'hand_positions': xy_list(self.hand_positions),
            'walk_sprite': self.walk_sprite,
            'default_level': self.default_level,
            'default_weapon': self.default_weapon,
        }


class HeroDecoder(RecordDecoder):
    """Hero decoder.

    Tagged ``HERO`` blocks carry 32-bit fields and counted lists. The
    legacy layout is a 256-byte record of 16-bit values; it has no
    elemental table, so legacy heroes get neutral (0.0) resistances.
    """

    domain = "heroes"
    modern_name = "heroes.reld"
    legacy_extensions = ("HSP", "DT2")
    extra_names = ("{project}.DT0",)
    block_tag = b'HERO'
    stride = HERO_STRIDE
    legacy_struct = LEGACY_HERO

    def parse_block(self, block: ReldBlock, context: DecodeContext) -> HeroRecord:
        cur = block.cursor
        limit = context.limits.max_list_entries
        hero = HeroRecord(name=read_prefixed_string(cur))
        hero.picture = cur.read_i32()
        hero.palette = cur.read_i32()
        hero.portrait = cur.read_i32()
        hero.portrait_palette = cur.read_i32()
        hero.stats = Stats.read(cur)
        hero.level_mp = cur.read_i32_array(read_count(cur, limit, "level MP"))
        hero.elementals = cur.read_f32_array(read_count(cur, limit, "elemental"))
        hand_count = read_count(cur, limit, "hand position")
        hero.hand_positions = [(cur.read_i32(), cur.read_i32()) for _ in range(hand_count)]
        return hero

    def parse_record(self, window: bytes, index: int, context: DecodeContext) -> HeroRecord:
        parsed = self.parse_struct(window)
        hero = HeroRecord(
            name=decode_fixed_string(parsed.name),
            picture=parsed.picture,
            palette=parsed.palette,
            portrait=parsed.portrait,
            portrait_palette=parsed.portrait_palette,
            stats=Stats.from_container(parsed.stats),
            elementals=[0.0] * ELEMENT_COUNT,
            hand_positions=[(p.x, p.y) for p in parsed.hand_positions],
            walk_sprite=parsed.walk_sprite,
            walk_palette=parsed.walk_palette,
            default_level=parsed.default_level,
            default_weapon=parsed.default_weapon,
            spell_lists=[list(spells) for spells in parsed.spell_lists],
            have_tag=parsed.have_tag,
            alive_tag=parsed.alive_tag,
            leader_tag=parsed.leader_tag,
            active_tag=parsed.active_tag,
        )
        if hero.name:
            logger.debug(f"Hero {index}: {hero.name}, HP: {hero.stats.hp}, MP: {hero.stats.mp}")
        return hero
