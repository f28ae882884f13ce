"""General project settings (general.reld / .GEN)."""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List
import logging
import struct

from .base import DecodeContext, RecordDecoder
from .reld import ReldReader
from .. import constants as c
from ..cursor import decode_fixed_string

logger = logging.getLogger(__name__)


@dataclass
class GeneralData:
    """Global project scalars."""
    title: str = ""
    author: str = ""
    starting_map: int = 0
    starting_x: int = 0
    starting_y: int = 0
    starting_gold: int = 0
    starting_heroes: List[int] = field(default_factory=list)
    starting_items: List[int] = field(default_factory=list)
    title_music: int = 0
    victory_music: int = 0
    battle_music: int = 0
    max_hero: int = 0
    max_enemy: int = 0
    max_map: int = 0
    max_attack: int = 0
    max_tile: int = 0
    max_formation: int = 0
    max_palette: int = 0
    max_textbox: int = 0
    num_plotscripts: int = 0
    new_game_script: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Word index of each 16-bit field in the legacy .GEN table
GEN_FIELDS = {
    'max_map': c.GEN_MAX_MAP,
    'title_music': c.GEN_TITLE_MUSIC,
    'victory_music': c.GEN_VICTORY_MUSIC,
    'battle_music': c.GEN_BATTLE_MUSIC,
    'max_tile': c.GEN_MAX_TILE,
    'max_attack': c.GEN_MAX_ATTACK,
    'max_hero': c.GEN_MAX_HERO,
    'max_enemy': c.GEN_MAX_ENEMY,
    'max_formation': c.GEN_MAX_FORMATION,
    'max_palette': c.GEN_MAX_PALETTE,
    'max_textbox': c.GEN_MAX_TEXTBOX,
    'num_plotscripts': c.GEN_NUM_PLOTSCRIPTS,
    'new_game_script': c.GEN_NEW_GAME_SCRIPT,
}


class GeneralDecoder(RecordDecoder):
    """Decoder for the single general-settings record.

    Tagged form: one block per field (TITL, AUTH, STMP, STX , STY , STGL,
    STHR, STIT). Legacy form: a table of 16-bit words indexed by the
    GEN_* constants, with the title in a 32-byte field after the table.
    """

    domain = "general"
    modern_name = "general.reld"
    legacy_extensions = ("GEN",)

    def parse_tagged(self, reader: ReldReader, context: DecodeContext) -> GeneralData:
        general = GeneralData()
        for block in reader.blocks():
            cur = block.cursor
            if block.tag == b'TITL':
                general.title = cur.read_fixed_string(block.size)
            elif block.tag == b'AUTH':
                general.author = cur.read_fixed_string(block.size)
            elif block.tag == b'STMP':
                general.starting_map = cur.read_i32()
            elif block.tag == b'STX ':
                general.starting_x = cur.read_i32()
            elif block.tag == b'STY ':
                general.starting_y = cur.read_i32()
            elif block.tag == b'STGL':
                general.starting_gold = cur.read_i32()
            elif block.tag == b'STHR':
                general.starting_heroes = cur.read_i32_array(block.size // 4)
            elif block.tag == b'STIT':
                general.starting_items = cur.read_i32_array(block.size // 4)
            else:
                logger.debug(f"Skipping unknown general block {block.tag!r}")
        return general

    def parse_fixed(self, data: bytes, context: DecodeContext) -> GeneralData:
        general = GeneralData()
        for name, word in GEN_FIELDS.items():
            offset = word * 2
            if offset + 2 <= len(data):
                setattr(general, name, struct.unpack_from('<h', data, offset)[0])

        title_end = c.GEN_TITLE_OFFSET + c.GEN_TITLE_SIZE
        if len(data) >= title_end:
            general.title = decode_fixed_string(data[c.GEN_TITLE_OFFSET:title_end])

        logger.info(
            f"General data: Title='{general.title}', MaxHero={general.max_hero}, "
            f"MaxMap={general.max_map}"
        )
        return general
