"""
Format detection for RPG project containers
"""

from enum import Enum, auto
from pathlib import Path

from ..constants import MODERN_MAGIC
from ..errors import LumpNotFoundError


class ContainerFormat(Enum):
    """Supported project container encodings"""
    DIRECTORY = auto()
    MODERN = auto()
    LEGACY = auto()


def detect_container_format(path: Path) -> ContainerFormat:
    """
    Detect how a project is stored on disk

    A directory is an unlumped project. A file is a modern container when
    it starts with the ``RPG!`` magic, otherwise it is a legacy lump stream.

    Raises:
        LumpNotFoundError: If the path does not exist or cannot be read
    """
    path = Path(path)
    if path.is_dir():
        return ContainerFormat.DIRECTORY
    if not path.is_file():
        raise LumpNotFoundError(f"Project path not found: {path}")

    try:
        with open(path, 'rb') as f:
            magic = f.read(4)
    except OSError as e:
        raise LumpNotFoundError(f"Cannot read project file {path}: {e}") from e

    if magic == MODERN_MAGIC:
        return ContainerFormat.MODERN
    return ContainerFormat.LEGACY
