"""Legacy positional lump stream."""
from pathlib import Path
from typing import Iterator, Tuple
import logging

from .base import ContainerReader
from ..cursor import ByteCursor
from ..errors import MalformedContainerError

logger = logging.getLogger(__name__)


def decode_legacy_size(b1: int, b2: int, b3: int, b4: int) -> int:
    """Decode the middle-endian lump size of the legacy stream.

    Bytes in file order ``b1 b2 b3 b4`` carry bits 16-23, 24-31, 0-7 and
    8-15 respectively. The result is a signed 32-bit value.
    """
    size = (b1 << 16) | (b2 << 24) | b3 | (b4 << 8)
    if size & 0x80000000:
        size -= 1 << 32
    return size


class LegacyContainerReader(ContainerReader):
    """Reader for the old ``name\\0 size data`` lump stream.

    The stream ends at an empty name or at end of file. A negative size,
    a size that runs past end of file, or a truncated record stops
    ingestion with everything read so far kept.
    """

    def iter_lumps(self, path: Path) -> Iterator[Tuple[str, bytes]]:
        cursor = ByteCursor(self._read_file(path))
        logger.info("Loading old engine lumped format")

        while not cursor.at_end():
            offset = cursor.position
            name, terminated = cursor.read_c_string(self.limits.max_name_length)
            if not name:
                logger.debug(f"Empty lump name at offset {offset}, end of lumps")
                return
            if not terminated:
                raise MalformedContainerError(
                    f"Unterminated lump name {name[:32]!r} at offset {offset}"
                )

            if cursor.remaining < 4:
                raise MalformedContainerError(f"Truncated size field for lump {name!r}")
            size = decode_legacy_size(*cursor.read_bytes(4))

            if size < 0 or size > cursor.remaining:
                raise MalformedContainerError(
                    f"Invalid lump size {size} for lump {name!r} "
                    f"({cursor.remaining} bytes left)"
                )

            logger.debug(f"Loaded lump: {name} ({size} bytes)")
            yield name, cursor.read_bytes(size)
