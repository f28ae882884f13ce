"""Enemy records (enemies.reld / .DT5)."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union
import logging

from construct import Array, Bytes, Float32l, Int32sl, Padding, Struct

from .base import DecodeContext, RecordDecoder
from .common import (
    STATS_I32, EnemyBehavior, Stats, enum_value, read_count, read_prefixed_string, to_enum,
)
from .reld import ReldBlock
from ..constants import ELEMENT_COUNT, ENEMY_STRIDE
from ..cursor import ByteCursor, decode_fixed_string

logger = logging.getLogger(__name__)

LEGACY_ATTACK_SLOTS = 4

# 160-byte legacy enemy record
LEGACY_ENEMY = Struct(
    "name" / Bytes(32),
    "picture" / Int32sl,
    "palette" / Int32sl,
    "death_picture" / Int32sl,
    "death_palette" / Int32sl,
    "stats" / STATS_I32,
    "behavior" / Int32sl,
    "aggression" / Int32sl,
    "intelligence" / Int32sl,
    "exp_reward" / Int32sl,
    "gold_reward" / Int32sl,
    "item_drop" / Int32sl,
    "item_drop_chance" / Float32l,
    "elementals" / Array(ELEMENT_COUNT, Float32l),
    "attack_ids" / Array(LEGACY_ATTACK_SLOTS, Int32sl),
    Padding(8),
)


@dataclass
class EnemyAttack:
    """Attack entry embedded in a tagged enemy block."""
    attack_type: int
    power: int
    accuracy: int
    element: int
    effect: int

    @classmethod
    def read(cls, cursor: ByteCursor) -> 'EnemyAttack':
        return cls(*cursor.read_i32_array(5))


@dataclass
class EnemyRecord:
    """Single enemy definition."""
    name: str = ""
    picture: int = 0
    palette: int = 0
    death_picture: int = 0
    death_palette: int = 0
    stats: Stats = field(default_factory=Stats)
    behavior: Union[EnemyBehavior, int] = EnemyBehavior.NORMAL
    aggression: int = 0
    intelligence: int = 0
    exp_reward: int = 0
    gold_reward: int = 0
    item_drop: int = 0
    item_drop_chance: float = 0.0
    elementals: List[float] = field(default_factory=list)
    attacks: List[EnemyAttack] = field(default_factory=list)  # tagged layout
    attack_ids: List[int] = field(default_factory=list)  # legacy layout

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'picture': self.picture,
            'palette': self.palette,
            'stats': self.stats.to_dict(),
            'behavior': enum_value(self.behavior),
            'exp_reward': self.exp_reward,
            'gold_reward': self.gold_reward,
            'item_drop': self.item_drop,
            'item_drop_chance': self.item_drop_chance,
            'elementals': list(self.elementals),
            'attacks': len(self.attacks) or len(self.attack_ids),
        }


class EnemyDecoder(RecordDecoder):
    """Enemy decoder (``ENEM`` blocks or 160-byte records)."""

    domain = "enemies"
    modern_name = "enemies.reld"
    legacy_extensions = ("DT5",)
    block_tag = b'ENEM'
    stride = ENEMY_STRIDE
    legacy_struct = LEGACY_ENEMY

    def parse_block(self, block: ReldBlock, context: DecodeContext) -> EnemyRecord:
        cur = block.cursor
        limit = context.limits.max_list_entries
        enemy = EnemyRecord(name=read_prefixed_string(cur))
        enemy.picture = cur.read_i32()
        enemy.palette = cur.read_i32()
        enemy.death_picture = cur.read_i32()
        enemy.death_palette = cur.read_i32()
        enemy.stats = Stats.read(cur)
        enemy.behavior = to_enum(EnemyBehavior, cur.read_i32())
        enemy.aggression = cur.read_i32()
        enemy.intelligence = cur.read_i32()
        enemy.exp_reward = cur.read_i32()
        enemy.gold_reward = cur.read_i32()
        enemy.item_drop = cur.read_i32()
        enemy.item_drop_chance = cur.read_f32()
        enemy.elementals = cur.read_f32_array(read_count(cur, limit, "elemental"))
        attack_count = read_count(cur, limit, "attack")
        enemy.attacks = [EnemyAttack.read(cur) for _ in range(attack_count)]
        return enemy

    def parse_record(self, window: bytes, index: int, context: DecodeContext) -> EnemyRecord:
        parsed = self.parse_struct(window)
        return EnemyRecord(
            name=decode_fixed_string(parsed.name),
            picture=parsed.picture,
            palette=parsed.palette,
            death_picture=parsed.death_picture,
            death_palette=parsed.death_palette,
            stats=Stats.from_container(parsed.stats),
            behavior=to_enum(EnemyBehavior, parsed.behavior),
            aggression=parsed.aggression,
            intelligence=parsed.intelligence,
            exp_reward=parsed.exp_reward,
            gold_reward=parsed.gold_reward,
            item_drop=parsed.item_drop,
            item_drop_chance=parsed.item_drop_chance,
            elementals=list(parsed.elementals),
            attack_ids=list(parsed.attack_ids),
        )
