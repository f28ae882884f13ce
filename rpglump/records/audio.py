"""Audio records (audio.reld / .DT9)."""
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from construct import Bytes, Int32sl, Struct

from .base import DecodeContext, RecordDecoder
from .common import AudioFormat, AudioType, enum_value, read_count, read_metadata, to_enum
from .reld import ReldBlock
from ..constants import AUDIO_STRIDE
from ..cursor import decode_fixed_string

LEGACY_AUDIO = Struct(
    "id" / Int32sl,
    "name" / Bytes(32),
    "audio_type" / Int32sl,
    "audio_format" / Int32sl,
    "sample_rate" / Int32sl,
    "channels" / Int32sl,
    "bit_depth" / Int32sl,
)


@dataclass
class AudioRecord:
    id: int = 0
    name: str = ""
    audio_type: Union[AudioType, int] = AudioType.NONE
    audio_format: Union[AudioFormat, int] = AudioFormat.NONE
    sample_rate: int = 0
    channels: int = 0
    bit_depth: int = 0
    raw_data: bytes = b''
    metadata: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'audio_type': enum_value(self.audio_type),
            'audio_format': enum_value(self.audio_format),
            'sample_rate': self.sample_rate,
            'channels': self.channels,
            'bit_depth': self.bit_depth,
            'data_bytes': len(self.raw_data),
            'metadata': dict(self.metadata),
        }


class AudioDecoder(RecordDecoder):
    domain = "audio"
    modern_name = "audio.reld"
    legacy_extensions = ("DT9",)
    block_tag = b'AUDI'
    stride = AUDIO_STRIDE
    legacy_struct = LEGACY_AUDIO

    def parse_block(self, block: ReldBlock, context: DecodeContext) -> AudioRecord:
        cur = block.cursor
        limit = context.limits.max_list_entries
        audio = AudioRecord(id=cur.read_i32(), name=cur.read_fixed_string(32))
        audio.audio_type = to_enum(AudioType, cur.read_i32())
        audio.audio_format = to_enum(AudioFormat, cur.read_i32())
        audio.sample_rate = cur.read_i32()
        audio.channels = cur.read_i32()
        audio.bit_depth = cur.read_i32()
        audio.raw_data = cur.read_bytes(read_count(cur, limit, "audio byte"))
        audio.metadata = read_metadata(cur, limit)
        return audio

    def parse_record(self, window: bytes, index: int, context: DecodeContext) -> AudioRecord:
        parsed = self.parse_struct(window)
        return AudioRecord(
            id=parsed.id,
            name=decode_fixed_string(parsed.name),
            audio_type=to_enum(AudioType, parsed.audio_type),
            audio_format=to_enum(AudioFormat, parsed.audio_format),
            sample_rate=parsed.sample_rate,
            channels=parsed.channels,
            bit_depth=parsed.bit_depth,
        )
