"""Lump store for one loaded project."""
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Type, Union
import logging

from .base import ContainerReader
from .directory import DirectoryReader
from .format_detector import ContainerFormat, detect_container_format
from .legacy import LegacyContainerReader
from .modern import ModernContainerReader
from ..constants import DecoderLimits, DEFAULT_LIMITS
from ..errors import MalformedContainerError

logger = logging.getLogger(__name__)

READERS: Dict[ContainerFormat, Type[ContainerReader]] = {
    ContainerFormat.DIRECTORY: DirectoryReader,
    ContainerFormat.MODERN: ModernContainerReader,
    ContainerFormat.LEGACY: LegacyContainerReader,
}


class LumpStore:
    """Name to bytes mapping for one project.

    Lumps are immutable once ingested. ``ingest`` clears the store first,
    so loading a new project must not overlap with decoding the old one.
    """

    def __init__(self, limits: DecoderLimits = DEFAULT_LIMITS):
        self.limits = limits
        self.source: Optional[Path] = None
        self.container_format: Optional[ContainerFormat] = None
        self.errors: List[str] = []
        self._lumps: Dict[str, bytes] = {}

    def ingest(self, path: Union[str, Path]) -> int:
        """Load every lump of the project at ``path``.

        Returns:
            Number of lumps in the store

        Raises:
            LumpNotFoundError: If the path does not exist or cannot be read
        """
        self.clear()
        path = Path(path)
        container_format = detect_container_format(path)
        self.source = path
        self.container_format = container_format

        reader = READERS[container_format](self.limits)
        try:
            for name, data in reader.iter_lumps(path):
                self._lumps[name] = data
        except MalformedContainerError as e:
            error_msg = f"Stopped reading {path} after {len(self._lumps)} lumps: {e}"
            logger.warning(error_msg)
            self.errors.append(error_msg)

        logger.info(f"Loaded {len(self._lumps)} lumps from {container_format.name.lower()} project {path}")
        return len(self._lumps)

    def clear(self) -> None:
        self._lumps.clear()
        self.errors = []
        self.source = None
        self.container_format = None

    def get(self, name: str) -> Optional[bytes]:
        return self._lumps.get(name)

    def text(self, name: str) -> Optional[str]:
        data = self._lumps.get(name)
        if data is None:
            return None
        return data.decode('utf-8', 'replace')

    def size(self, name: str) -> int:
        data = self._lumps.get(name)
        return len(data) if data is not None else 0

    def names(self) -> List[str]:
        return list(self._lumps)

    def __contains__(self, name: object) -> bool:
        return name in self._lumps

    def __len__(self) -> int:
        return len(self._lumps)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lumps)
