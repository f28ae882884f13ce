"""Project facade: one loaded lump store plus the per-domain loaders."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

from .constants import DEFAULT_LIMITS, DecoderLimits
from .container.store import LumpStore
from .models import MapData
from .naming import DEFAULT_PROJECT_NAME, resolve_project_name
from .records import (
    AudioDecoder, AudioRecord, DecodeContext, EnemyDecoder, EnemyRecord, GeneralData,
    GeneralDecoder, HeroDecoder, HeroRecord, ItemDecoder, ItemRecord, MapDecoder,
    RecordDecoder, SaveDecoder, SaveRecord, ScriptDecoder, ScriptRecord, SpellDecoder,
    SpellRecord, TextureDecoder, TextureRecord, TilesetData, TilesetDecoder,
    available_tileset_ids, records_to_dicts,
)

logger = logging.getLogger(__name__)

DECODERS = {
    decoder.domain: decoder
    for decoder in (
        GeneralDecoder, HeroDecoder, EnemyDecoder, MapDecoder, ItemDecoder,
        SpellDecoder, ScriptDecoder, TextureDecoder, AudioDecoder, SaveDecoder,
    )
}

PRIMARY_DOMAINS = (
    "general", "heroes", "enemies", "maps", "items",
    "spells", "scripts", "textures", "audio",
)
DOMAINS = PRIMARY_DOMAINS + ("saves",)


@dataclass
class DomainResult:
    """Outcome of decoding one domain."""
    domain: str
    value: Any = None
    error: Optional[str] = None
    missing: bool = False


class Project:
    """A loaded project.

    Each ``load_*`` call decodes one domain independently. A domain
    whose source lump is absent returns None and is listed in
    ``missing``; a domain whose data fails to decode returns None and
    its error is recorded in ``errors``. Neither affects other domains.
    """

    def __init__(self, limits: DecoderLimits = DEFAULT_LIMITS):
        self.limits = limits
        self.store = LumpStore(limits)
        self.project_name = DEFAULT_PROJECT_NAME
        self.errors: Dict[str, str] = {}
        self.missing: List[str] = []
        self._decoders: Dict[str, RecordDecoder] = {name: cls() for name, cls in DECODERS.items()}
        self._tilesets = TilesetDecoder(limits)

    @classmethod
    def from_path(cls, path: Union[str, Path], limits: DecoderLimits = DEFAULT_LIMITS) -> 'Project':
        project = cls(limits)
        project.open(path)
        return project

    def open(self, path: Union[str, Path]) -> int:
        """Ingest the project at ``path``, replacing anything loaded before.

        Raises:
            LumpNotFoundError: If the path does not exist or cannot be read
        """
        self.errors = {}
        self.missing = []
        count = self.store.ingest(path)
        self.project_name = resolve_project_name(path)
        logger.info(f"Opened project {self.project_name} ({count} lumps)")
        return count

    @property
    def context(self) -> DecodeContext:
        return DecodeContext(store=self.store, project_name=self.project_name, limits=self.limits)

    def decode_domain(self, domain: str) -> DomainResult:
        """Decode one domain without touching ``errors`` or ``missing``.

        Safe to call from several threads once the project is open.
        """
        decoder = self._decoders[domain]
        context = self.context
        source = decoder.find_source(context)
        if source is None:
            return DomainResult(domain, missing=True)

        name, data = source
        try:
            value = decoder.decode(data, context)
        except Exception as e:
            error_msg = f"Failed to parse {domain} data from {name}: {e}"
            logger.error(error_msg)
            return DomainResult(domain, error=error_msg)
        return DomainResult(domain, value=value)

    def load_domain(self, domain: str) -> Any:
        """Decode one domain, containing any failure to that domain.

        Records the outcome in ``errors``/``missing``. That bookkeeping is
        shared state; concurrent callers should use ``decode_domain``.
        """
        result = self.decode_domain(domain)
        if result.missing:
            if domain not in self.missing:
                self.missing.append(domain)
        elif result.error is not None:
            self.errors[domain] = result.error
        else:
            self.errors.pop(domain, None)
        return result.value

    def load_general_data(self) -> Optional[GeneralData]:
        return self.load_domain("general")

    def load_hero_data(self) -> Optional[List[HeroRecord]]:
        return self.load_domain("heroes")

    def load_enemy_data(self) -> Optional[List[EnemyRecord]]:
        return self.load_domain("enemies")

    def load_map_data(self) -> Optional[List[MapData]]:
        return self.load_domain("maps")

    def load_item_data(self) -> Optional[List[ItemRecord]]:
        return self.load_domain("items")

    def load_spell_data(self) -> Optional[List[SpellRecord]]:
        return self.load_domain("spells")

    def load_script_data(self) -> Optional[List[ScriptRecord]]:
        return self.load_domain("scripts")

    def load_texture_data(self) -> Optional[List[TextureRecord]]:
        return self.load_domain("textures")

    def load_audio_data(self) -> Optional[List[AudioRecord]]:
        return self.load_domain("audio")

    def load_save_data(self) -> Optional[List[SaveRecord]]:
        return self.load_domain("saves")

    def load_tileset_data(self, tileset_id: int) -> Optional[TilesetData]:
        source = self._tilesets.find_source(self.store, tileset_id)
        if source is None:
            logger.warning(f"No tileset lump for id {tileset_id}")
            return None

        name, data = source
        try:
            tileset = self._tilesets.decode(data, tileset_id)
        except Exception as e:
            logger.error(f"Failed to parse tileset {tileset_id} from {name}: {e}")
            return None
        logger.info(f"Loaded tileset {tileset_id}: {tileset.tile_count} tiles")
        return tileset

    def is_tileset_available(self, tileset_id: int) -> bool:
        return self._tilesets.find_source(self.store, tileset_id) is not None

    def available_tileset_ids(self) -> List[int]:
        return available_tileset_ids(self.store)

    def get_lump(self, name: str) -> Optional[bytes]:
        return self.store.get(name)

    def has_lump(self, name: str) -> bool:
        return name in self.store

    def lump_names(self) -> List[str]:
        return self.store.names()

    def lump_size(self, name: str) -> int:
        return self.store.size(name)

    def get_lump_as_text(self, name: str) -> Optional[str]:
        return self.store.text(name)

    def dispose(self) -> None:
        """Drop every lump and reset the project name."""
        self.store.clear()
        self.project_name = DEFAULT_PROJECT_NAME
        self.errors = {}
        self.missing = []


@dataclass
class GameData:
    """All primary domains of a project plus what went wrong decoding them."""
    general: Optional[GeneralData] = None
    heroes: Optional[List[HeroRecord]] = None
    enemies: Optional[List[EnemyRecord]] = None
    maps: Optional[List[MapData]] = None
    items: Optional[List[ItemRecord]] = None
    spells: Optional[List[SpellRecord]] = None
    scripts: Optional[List[ScriptRecord]] = None
    textures: Optional[List[TextureRecord]] = None
    audio: Optional[List[AudioRecord]] = None
    errors: Dict[str, str] = field(default_factory=dict)
    missing: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'general': self.general.to_dict() if self.general else None,
        }
        for domain in PRIMARY_DOMAINS[1:]:
            result[domain] = records_to_dicts(getattr(self, domain))
        result['errors'] = dict(self.errors)
        result['missing'] = list(self.missing)
        return result


def load_game_data(path: Union[str, Path], limits: DecoderLimits = DEFAULT_LIMITS) -> GameData:
    """Open ``path`` and decode every primary domain.

    Raises:
        LumpNotFoundError: If the path does not exist or cannot be read
    """
    project = Project.from_path(path, limits)
    game = GameData(**{domain: project.load_domain(domain) for domain in PRIMARY_DOMAINS})
    game.errors = dict(project.errors)
    game.missing = list(project.missing)
    logger.info(
        f"Loaded game data for {project.project_name}: "
        f"{len(game.errors)} failed, {len(game.missing)} missing"
    )
    return game
