"""Item records (items.reld / .DT3)."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from construct import Bytes, Int32sl, Struct

from .base import DecodeContext, RecordDecoder
from .common import (
    STATS_I32, ItemEffect, ItemType, Stats, enum_value, read_count, read_prefixed_string, to_enum,
)
from .reld import ReldBlock
from ..constants import ELEMENT_COUNT, ITEM_STRIDE
from ..cursor import decode_fixed_string

LEGACY_ITEM = Struct(
    "name" / Bytes(32),
    "description" / Bytes(32),
    "picture" / Int32sl,
    "palette" / Int32sl,
    "item_type" / Int32sl,
    "price" / Int32sl,
    "usable_by" / Int32sl,
    "effect" / Int32sl,
    "effect_arg" / Int32sl,
    "effect_arg2" / Int32sl,
    "stat_bonus" / STATS_I32,
)


@dataclass
class ItemRecord:
    name: str = ""
    description: str = ""
    picture: int = 0
    palette: int = 0
    item_type: Union[ItemType, int] = ItemType.NONE
    price: int = 0
    usable_by: int = 0
    effect: Union[ItemEffect, int] = ItemEffect.NONE
    effect_arg: int = 0
    effect_arg2: int = 0
    stat_bonus: Stats = field(default_factory=Stats)
    elementals: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'description': self.description,
            'picture': self.picture,
            'item_type': enum_value(self.item_type),
            'price': self.price,
            'usable_by': self.usable_by,
            'effect': enum_value(self.effect),
            'effect_arg': self.effect_arg,
            'effect_arg2': self.effect_arg2,
            'stat_bonus': self.stat_bonus.to_dict(),
            'elementals': list(self.elementals),
        }


class ItemDecoder(RecordDecoder):
    """Item decoder (``ITEM`` blocks or 128-byte records)."""

    domain = "items"
    modern_name = "items.reld"
    legacy_extensions = ("DT3",)
    block_tag = b'ITEM'
    stride = ITEM_STRIDE
    legacy_struct = LEGACY_ITEM

    def parse_block(self, block: ReldBlock, context: DecodeContext) -> ItemRecord:
        cur = block.cursor
        item = ItemRecord(
            name=read_prefixed_string(cur),
            description=read_prefixed_string(cur),
        )
        item.picture = cur.read_i32()
        item.palette = cur.read_i32()
        item.item_type = to_enum(ItemType, cur.read_i32())
        item.price = cur.read_i32()
        item.usable_by = cur.read_i32()
        item.effect = to_enum(ItemEffect, cur.read_i32())
        item.effect_arg = cur.read_i32()
        item.effect_arg2 = cur.read_i32()
        item.stat_bonus = Stats.read(cur)
        count = read_count(cur, context.limits.max_list_entries, "elemental")
        item.elementals = cur.read_f32_array(count)
        return item

    def parse_record(self, window: bytes, index: int, context: DecodeContext) -> ItemRecord:
        parsed = self.parse_struct(window)
        return ItemRecord(
            name=decode_fixed_string(parsed.name),
            description=decode_fixed_string(parsed.description),
            picture=parsed.picture,
            palette=parsed.palette,
            item_type=to_enum(ItemType, parsed.item_type),
            price=parsed.price,
            usable_by=parsed.usable_by,
            effect=to_enum(ItemEffect, parsed.effect),
            effect_arg=parsed.effect_arg,
            effect_arg2=parsed.effect_arg2,
            stat_bonus=Stats.from_container(parsed.stat_bonus),
            elementals=[0.0] * ELEMENT_COUNT,
        )
