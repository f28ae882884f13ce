"""Texture records (textures.reld / .DT8)."""
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from construct import Bytes, Int32sl, Struct

from .base import DecodeContext, RecordDecoder
from .common import TextureFormat, enum_value, read_count, read_metadata, to_enum
from .reld import ReldBlock
from ..constants import TEXTURE_STRIDE
from ..cursor import decode_fixed_string

# 48-byte legacy window; the palette index falls outside it and stays 0
LEGACY_TEXTURE = Struct(
    "id" / Int32sl,
    "name" / Bytes(32),
    "width" / Int32sl,
    "height" / Int32sl,
    "texture_format" / Int32sl,
)


@dataclass
class TextureRecord:
    id: int = 0
    name: str = ""
    width: int = 0
    height: int = 0
    texture_format: Union[TextureFormat, int] = TextureFormat.NONE
    palette: int = 0
    pixel_data: bytes = b''
    palette_data: bytes = b''
    metadata: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'width': self.width,
            'height': self.height,
            'texture_format': enum_value(self.texture_format),
            'palette': self.palette,
            'pixel_bytes': len(self.pixel_data),
            'palette_bytes': len(self.palette_data),
            'metadata': dict(self.metadata),
        }


class TextureDecoder(RecordDecoder):
    """Texture decoder. Only indexed textures carry palette bytes."""

    domain = "textures"
    modern_name = "textures.reld"
    legacy_extensions = ("DT8",)
    block_tag = b'TEXT'
    stride = TEXTURE_STRIDE
    legacy_struct = LEGACY_TEXTURE

    def parse_block(self, block: ReldBlock, context: DecodeContext) -> TextureRecord:
        cur = block.cursor
        limit = context.limits.max_list_entries
        texture = TextureRecord(id=cur.read_i32(), name=cur.read_fixed_string(32))
        texture.width = cur.read_i32()
        texture.height = cur.read_i32()
        texture.texture_format = to_enum(TextureFormat, cur.read_i32())
        texture.palette = cur.read_i32()
        texture.pixel_data = cur.read_bytes(read_count(cur, limit, "pixel byte"))
        if texture.texture_format == TextureFormat.INDEXED:
            texture.palette_data = cur.read_bytes(read_count(cur, limit, "palette byte"))
        texture.metadata = read_metadata(cur, limit)
        return texture

    def parse_record(self, window: bytes, index: int, context: DecodeContext) -> TextureRecord:
        parsed = self.parse_struct(window)
        return TextureRecord(
            id=parsed.id,
            name=decode_fixed_string(parsed.name),
            width=parsed.width,
            height=parsed.height,
            texture_format=to_enum(TextureFormat, parsed.texture_format),
        )
