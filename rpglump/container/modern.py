"""Modern ``RPG!`` container with a fixed lump directory."""
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple
import logging

from construct import Bytes, Const, ConstructError, Int32sl, Struct

from .base import ContainerReader
from ..constants import MODERN_ENTRY_SIZE, MODERN_HEADER_SIZE, MODERN_MAGIC, MODERN_NAME_SIZE
from ..cursor import decode_fixed_string
from ..errors import MalformedContainerError

logger = logging.getLogger(__name__)

# Define container structures using `construct`
MODERN_HEADER = Struct(
    "magic" / Const(MODERN_MAGIC),
    "version" / Int32sl,
    "lump_count" / Int32sl,
    "header_size" / Int32sl,
)

DIRECTORY_ENTRY = Struct(
    "name" / Bytes(MODERN_NAME_SIZE),
    "offset" / Int32sl,
    "size" / Int32sl,
    "flags" / Int32sl,
)


@dataclass
class DirectoryEntry:
    """Single lump directory entry."""
    name: str
    offset: int
    size: int
    flags: int

    @classmethod
    def from_bytes(cls, data: bytes) -> 'DirectoryEntry':
        parsed = DIRECTORY_ENTRY.parse(data)
        return cls(
            name=decode_fixed_string(parsed.name),
            offset=parsed.offset,
            size=parsed.size,
            flags=parsed.flags,
        )


class ModernContainerReader(ContainerReader):
    """Reader for ``RPG!`` containers.

    Header: magic, version, lump count, header size (all i32). The
    directory starts at ``header_size`` and holds one 44-byte entry per
    lump; payloads are located by offset, so directory and data may be in
    any order. The directory is indexed in one pass and payloads are
    copied in a second pass using that index.
    """

    def iter_lumps(self, path: Path) -> Iterator[Tuple[str, bytes]]:
        data = self._read_file(path)
        entries, problem = self.build_index(data)

        for entry in entries:
            yield entry.name, data[entry.offset:entry.offset + entry.size]

        if problem:
            raise MalformedContainerError(problem)

    def build_index(self, data: bytes) -> Tuple[List[DirectoryEntry], Optional[str]]:
        """Index the lump directory.

        Returns:
            Tuple of (valid entries, problem). ``problem`` describes the
            first inconsistency found; entries before it are still returned.

        Raises:
            MalformedContainerError: If the header itself is unusable
        """
        try:
            header = MODERN_HEADER.parse(data[:MODERN_HEADER_SIZE])
        except ConstructError as e:
            raise MalformedContainerError(f"Invalid RPG! header: {e}") from e

        logger.info(f"Modern RPG version {header.version}, {header.lump_count} lumps")

        if header.lump_count < 0 or header.lump_count > self.limits.max_lumps:
            raise MalformedContainerError(
                f"Lump count {header.lump_count} outside 0..{self.limits.max_lumps}"
            )
        if header.header_size < MODERN_HEADER_SIZE or header.header_size > len(data):
            raise MalformedContainerError(
                f"Header size {header.header_size} invalid for {len(data)} byte file"
            )

        directory_end = header.header_size + header.lump_count * MODERN_ENTRY_SIZE
        problem = None
        count = header.lump_count
        if directory_end > len(data):
            count = (len(data) - header.header_size) // MODERN_ENTRY_SIZE
            problem = (
                f"Directory of {header.lump_count} entries overruns file; "
                f"only {count} entries present"
            )

        entries: List[DirectoryEntry] = []
        for i in range(count):
            start = header.header_size + i * MODERN_ENTRY_SIZE
            entry = DirectoryEntry.from_bytes(data[start:start + MODERN_ENTRY_SIZE])
            if entry.offset < 0 or entry.size < 0 or entry.offset + entry.size > len(data):
                problem = (
                    f"Lump {entry.name!r} (entry {i}) at offset {entry.offset} "
                    f"size {entry.size} lies outside the file"
                )
                break
            entries.append(entry)

        return entries, problem
