"""Per-domain record decoders."""
from .audio import AudioDecoder, AudioRecord
from .base import DecodeContext, RecordDecoder, records_to_dicts
from .enemies import EnemyAttack, EnemyDecoder, EnemyRecord
from .general import GeneralData, GeneralDecoder
from .heroes import HeroDecoder, HeroRecord
from .items import ItemDecoder, ItemRecord
from .maps import MapDecoder, sniff_header_stride
from .reld import ReldBlock, ReldReader, is_reld
from .saves import PlayerRecord, SaveDecoder, SaveRecord
from .scripts import ScriptDecoder, ScriptRecord
from .spells import SpellDecoder, SpellRecord
from .textures import TextureDecoder, TextureRecord
from .tilesets import TileAnimation, TilesetData, TilesetDecoder, available_tileset_ids

__all__ = [
    'DecodeContext',
    'RecordDecoder',
    'records_to_dicts',
    'ReldBlock',
    'ReldReader',
    'is_reld',
    'GeneralData',
    'GeneralDecoder',
    'HeroRecord',
    'HeroDecoder',
    'EnemyAttack',
    'EnemyRecord',
    'EnemyDecoder',
    'MapDecoder',
    'sniff_header_stride',
    'ItemRecord',
    'ItemDecoder',
    'SpellRecord',
    'SpellDecoder',
    'ScriptRecord',
    'ScriptDecoder',
    'TextureRecord',
    'TextureDecoder',
    'AudioRecord',
    'AudioDecoder',
    'PlayerRecord',
    'SaveRecord',
    'SaveDecoder',
    'TileAnimation',
    'TilesetData',
    'TilesetDecoder',
    'available_tileset_ids',
]
