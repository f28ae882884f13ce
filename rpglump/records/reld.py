"""RELD tagged-block record streams."""
from dataclasses import dataclass
from typing import Iterator
import logging

from ..constants import RELD_MAGIC
from ..cursor import ByteCursor
from ..errors import MalformedRecordError

logger = logging.getLogger(__name__)

BLOCK_HEADER_SIZE = 8


@dataclass
class ReldBlock:
    """One ``(tag, length, payload)`` group of a RELD stream."""
    tag: bytes
    offset: int
    cursor: ByteCursor  # limited to exactly the payload

    @property
    def size(self) -> int:
        return len(self.cursor)


def is_reld(data: bytes) -> bool:
    """True when ``data`` carries the RELD magic and more."""
    return len(data) > 4 and data[:4] == RELD_MAGIC


class ReldReader:
    """Walks the blocks of a RELD stream.

    Layout: ``RELD`` magic, version i32, then repeated blocks of a 4-byte
    tag, an i32 payload length and the payload. Callers decide which tags
    they understand; the payload of every other tag is simply skipped.
    """

    def __init__(self, data: bytes):
        if not is_reld(data):
            raise MalformedRecordError("Missing RELD magic")
        self._cursor = ByteCursor(data, 4)
        self.version = self._cursor.read_i32()

    def blocks(self) -> Iterator[ReldBlock]:
        cursor = self._cursor
        while not cursor.at_end():
            offset = cursor.position
            if cursor.remaining < BLOCK_HEADER_SIZE:
                raise MalformedRecordError(
                    f"Truncated block header at offset {offset} "
                    f"({cursor.remaining} bytes left)"
                )
            tag = cursor.read_bytes(4)
            length = cursor.read_i32()
            if length < 0 or length > cursor.remaining:
                raise MalformedRecordError(
                    f"Block {tag!r} at offset {offset} claims {length} bytes, "
                    f"{cursor.remaining} available"
                )
            yield ReldBlock(tag=tag, offset=offset, cursor=cursor.sub_cursor(length))
