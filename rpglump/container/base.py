"""Base class for container readers."""
from pathlib import Path
from typing import Iterator, Tuple
import logging

from ..constants import DecoderLimits, DEFAULT_LIMITS
from ..errors import LumpNotFoundError

logger = logging.getLogger(__name__)


class ContainerReader:
    """Base class for the three ingestion strategies.

    Subclasses implement ``iter_lumps`` as a generator of ``(name, data)``
    pairs. Raising MalformedContainerError from the generator ends
    ingestion; every pair yielded before that is kept by the store.
    """

    def __init__(self, limits: DecoderLimits = DEFAULT_LIMITS):
        self.limits = limits

    def iter_lumps(self, path: Path) -> Iterator[Tuple[str, bytes]]:
        raise NotImplementedError("Container readers must implement iter_lumps()")

    @staticmethod
    def _read_file(path: Path) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise LumpNotFoundError(f"Cannot read {path}: {e}") from e
