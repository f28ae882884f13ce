"""Script records (scripts.reld / .DT7)."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from construct import Bytes, Int32sl, Padding, Struct

from .base import DecodeContext, RecordDecoder
from .common import ScriptType, enum_value, read_count, read_prefixed_string, to_enum
from .reld import ReldBlock
from ..constants import SCRIPT_STRIDE
from ..cursor import ByteCursor, decode_fixed_string

LABEL_NAME_SIZE = 32

CONST_STRING = 0
CONST_INT = 1
CONST_FLOAT = 2

Constant = Optional[Union[str, int, float]]

LEGACY_SCRIPT = Struct(
    "id" / Int32sl,
    "name" / Bytes(32),
    "script_type" / Int32sl,
    Padding(SCRIPT_STRIDE - 40),
)


@dataclass
class ScriptRecord:
    id: int = 0
    name: str = ""
    script_type: Union[ScriptType, int] = ScriptType.NONE
    bytecode: bytes = b''
    constants: List[Constant] = field(default_factory=list)
    labels: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'script_type': enum_value(self.script_type),
            'bytecode_size': len(self.bytecode),
            'constants': list(self.constants),
            'labels': dict(self.labels),
        }


def read_constant(cursor: ByteCursor) -> Constant:
    """Read one typed constant; unknown type codes carry no payload."""
    kind = cursor.read_i32()
    if kind == CONST_STRING:
        return read_prefixed_string(cursor)
    if kind == CONST_INT:
        return cursor.read_i32()
    if kind == CONST_FLOAT:
        return cursor.read_f32()
    return None


class ScriptDecoder(RecordDecoder):
    """Script decoder.

    Legacy records only carry the id, name and type; bytecode, constants
    and labels exist in the tagged ``SCRP`` form only.
    """

    domain = "scripts"
    modern_name = "scripts.reld"
    legacy_extensions = ("DT7",)
    block_tag = b'SCRP'
    stride = SCRIPT_STRIDE
    legacy_struct = LEGACY_SCRIPT

    def parse_block(self, block: ReldBlock, context: DecodeContext) -> ScriptRecord:
        cur = block.cursor
        limit = context.limits.max_list_entries
        script = ScriptRecord(id=cur.read_i32(), name=cur.read_fixed_string(32))
        script.script_type = to_enum(ScriptType, cur.read_i32())
        script.bytecode = cur.read_bytes(read_count(cur, limit, "bytecode byte"))
        script.constants = [read_constant(cur) for _ in range(read_count(cur, limit, "constant"))]
        for _ in range(read_count(cur, limit, "label")):
            label = cur.read_fixed_string(LABEL_NAME_SIZE)
            script.labels[label] = cur.read_i32()
        return script

    def parse_record(self, window: bytes, index: int, context: DecodeContext) -> ScriptRecord:
        parsed = self.parse_struct(window)
        return ScriptRecord(
            id=parsed.id,
            name=decode_fixed_string(parsed.name),
            script_type=to_enum(ScriptType, parsed.script_type),
        )
