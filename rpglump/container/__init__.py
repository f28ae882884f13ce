"""Project containers and the lump store."""
from .format_detector import ContainerFormat, detect_container_format
from .legacy import LegacyContainerReader, decode_legacy_size
from .modern import DirectoryEntry, ModernContainerReader
from .directory import DirectoryReader
from .store import LumpStore

__all__ = [
    'ContainerFormat',
    'detect_container_format',
    'DirectoryReader',
    'DirectoryEntry',
    'LegacyContainerReader',
    'ModernContainerReader',
    'LumpStore',
    'decode_legacy_size',
]
