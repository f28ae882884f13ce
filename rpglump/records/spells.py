"""Spell records (spells.reld / .DT4)."""
from dataclasses import dataclass
from typing import Any, Dict, Union
import logging

from construct import Bytes, Int32sl, Struct

from .base import DecodeContext, RecordDecoder
from .common import SpellEffect, SpellType, TargetType, enum_value, read_prefixed_string, to_enum
from .reld import ReldBlock
from ..constants import SPELL_STRIDE
from ..cursor import decode_fixed_string

logger = logging.getLogger(__name__)

SPELL_FIELDS = (
    "picture", "palette", "spell_type", "mp_cost", "target_type",
    "effect", "effect_arg", "effect_arg2", "effect_arg3",
    "power", "accuracy", "element", "animation", "sound_effect",
)

# The 96-byte legacy window ends after effect_arg2; later fields keep their defaults
LEGACY_SPELL_FIELDS = SPELL_FIELDS[:(SPELL_STRIDE - 64) // 4]

LEGACY_SPELL = Struct(
    "name" / Bytes(32),
    "description" / Bytes(32),
    *[name / Int32sl for name in LEGACY_SPELL_FIELDS],
)


@dataclass
class SpellRecord:
    name: str = ""
    description: str = ""
    picture: int = 0
    palette: int = 0
    spell_type: Union[SpellType, int] = SpellType.NORMAL
    mp_cost: int = 0
    target_type: Union[TargetType, int] = TargetType.NONE
    effect: Union[SpellEffect, int] = SpellEffect.NONE
    effect_arg: int = 0
    effect_arg2: int = 0
    effect_arg3: int = 0
    power: int = 0
    accuracy: int = 0
    element: int = 0
    animation: int = 0
    sound_effect: int = 0

    def to_dict(self) -> Dict[str, Any]:
        result = {'name': self.name, 'description': self.description}
        for name in SPELL_FIELDS:
            result[name] = enum_value(getattr(self, name))
        return result


def _spell_from_values(name: str, description: str, values: Dict[str, int]) -> SpellRecord:
    spell = SpellRecord(name=name, description=description, **values)
    spell.spell_type = to_enum(SpellType, spell.spell_type)
    spell.target_type = to_enum(TargetType, spell.target_type)
    spell.effect = to_enum(SpellEffect, spell.effect)
    return spell


class SpellDecoder(RecordDecoder):
    """Spell decoder.

    Tagged ``SPEL`` blocks hold the same fields as the legacy record in
    the same order, widened to 32 bits and with length-prefixed text.
    """

    domain = "spells"
    modern_name = "spells.reld"
    legacy_extensions = ("DT4",)
    block_tag = b'SPEL'
    stride = SPELL_STRIDE
    legacy_struct = LEGACY_SPELL

    def parse_block(self, block: ReldBlock, context: DecodeContext) -> SpellRecord:
        cur = block.cursor
        name = read_prefixed_string(cur)
        description = read_prefixed_string(cur)
        values = dict(zip(SPELL_FIELDS, cur.read_i32_array(len(SPELL_FIELDS))))
        return _spell_from_values(name, description, values)

    def parse_record(self, window: bytes, index: int, context: DecodeContext) -> SpellRecord:
        parsed = self.parse_struct(window)
        spell = _spell_from_values(
            decode_fixed_string(parsed.name),
            decode_fixed_string(parsed.description),
            {name: parsed[name] for name in LEGACY_SPELL_FIELDS},
        )
        if spell.name:
            logger.debug(f"Spell {index}: {spell.name}, MP cost {spell.mp_cost}")
        return spell
