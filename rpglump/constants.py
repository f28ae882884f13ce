# rpglump/constants.py
from dataclasses import dataclass

# Container magics
MODERN_MAGIC = b'RPG!'
RELD_MAGIC = b'RELD'
RGFX_MAGIC = b'RGFX'
BSAVE_MAGIC = 0xFD

# Modern container layout
MODERN_HEADER_SIZE = 16
MODERN_NAME_SIZE = 32
MODERN_ENTRY_SIZE = MODERN_NAME_SIZE + 12

# Raster bounds shared by every raster strategy
MIN_MAP_WIDTH = 16
MIN_MAP_HEIGHT = 10
MAX_MAP_DIMENSION = 32768
DEFAULT_MAP_SIZE = 50
DEFAULT_MAP_LAYERS = 3

BSAVE_PREFIX_SIZE = 7
BSAVE_HEADER_SIZE = 11  # prefix + width + height
COMPACT_HEADER_SIZE = 4

DEFAULT_TILE_ID = 1
MAX_NPCS_PER_MAP = 300
NPC_ENTRY_SIZE = 8

# Fixed-layout record strides
HERO_STRIDE = 256
ENEMY_STRIDE = 160
ITEM_STRIDE = 128
SPELL_STRIDE = 96
SCRIPT_STRIDE = 64
TEXTURE_STRIDE = 48
AUDIO_STRIDE = 56
SAVE_STRIDE = 1024
MAP_HEADER_STRIDES = (32, 24, 16, 8)
MAX_LEGACY_MAPS = 1000

# Entries in a legacy elemental table
ELEMENT_COUNT = 7

# General (.GEN) word indices
GEN_MAX_MAP = 0
GEN_TITLE_MUSIC = 2
GEN_VICTORY_MUSIC = 3
GEN_BATTLE_MUSIC = 4
GEN_MAX_TILE = 33
GEN_MAX_ATTACK = 34
GEN_MAX_HERO = 35
GEN_MAX_ENEMY = 36
GEN_MAX_FORMATION = 37
GEN_MAX_PALETTE = 38
GEN_MAX_TEXTBOX = 39
GEN_NUM_PLOTSCRIPTS = 40
GEN_NEW_GAME_SCRIPT = 41
GEN_WORD_COUNT = 500
GEN_TITLE_OFFSET = GEN_WORD_COUNT * 2
GEN_TITLE_SIZE = 32


@dataclass(frozen=True)
class DecoderLimits:
    """Upper bounds applied to counts and sizes read from untrusted headers."""
    max_lumps: int = 65536
    max_name_length: int = 255
    max_tiles: int = 65536
    max_list_entries: int = 1_000_000
    max_map_layers: int = 16
    max_map_cells: int = 1 << 24
    # bytes of grid arrays for one map, and for all maps of one legacy map lump
    max_map_bytes: int = 64 << 20
    max_total_map_bytes: int = 256 << 20


DEFAULT_LIMITS = DecoderLimits()
