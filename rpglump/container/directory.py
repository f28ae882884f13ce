"""Unlumped project directories."""
from pathlib import Path
from typing import Iterator, Tuple
import logging

from .base import ContainerReader

logger = logging.getLogger(__name__)


class DirectoryReader(ContainerReader):
    """Reads every file below a project directory as one lump.

    Lump names are paths relative to the root with ``/`` separators.
    """

    def iter_lumps(self, path: Path) -> Iterator[Tuple[str, bytes]]:
        root = Path(path)
        for file_path in sorted(root.rglob('*')):
            if not file_path.is_file():
                continue
            name = file_path.relative_to(root).as_posix()
            logger.debug(f"Reading lump {name} from {file_path}")
            yield name, self._read_file(file_path)
