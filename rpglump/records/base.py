"""Base record decoder."""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from construct import Struct

from .reld import ReldBlock, ReldReader, is_reld
from ..constants import DecoderLimits, DEFAULT_LIMITS
from ..container.store import LumpStore

logger = logging.getLogger(__name__)


@dataclass
class DecodeContext:
    """What a decoder may consult besides its own source blob."""
    store: LumpStore
    project_name: str
    limits: DecoderLimits = DEFAULT_LIMITS


class RecordDecoder:
    """Base class for per-domain record decoders.

    A decoder finds its source lump (modern name first, then the legacy
    name variants), then parses it either as a RELD tagged-block stream
    or as a sequence of fixed-size legacy records.

    Subclasses set the class attributes below and implement
    ``parse_block`` and ``parse_record``.
    """

    domain = ""
    modern_name = ""
    legacy_extensions: Sequence[str] = ()
    # Extra name templates tried after the standard ones ({project} is substituted)
    extra_names: Sequence[str] = ()
    block_tag = b''
    stride = 0
    # construct Struct describing one fixed-size record, at most ``stride`` bytes
    legacy_struct: Optional[Struct] = None

    def candidate_names(self, project_name: str) -> List[str]:
        """Lump names to try, in lookup order."""
        names = [self.modern_name]
        for ext in self.legacy_extensions:
            names.append(f"{project_name}.{ext}")
            names.append(f".{ext}")
        names.extend(template.format(project=project_name) for template in self.extra_names)
        return names

    def find_source(self, context: DecodeContext) -> Optional[Tuple[str, bytes]]:
        for name in self.candidate_names(context.project_name):
            data = context.store.get(name)
            if data is not None:
                logger.debug(f"Found {self.domain} data in lump {name} ({len(data)} bytes)")
                return name, data
        logger.debug(f"No {self.domain} lump among {self.candidate_names(context.project_name)}")
        return None

    def decode(self, data: bytes, context: DecodeContext) -> Any:
        """Decode one source blob, dispatching on the RELD magic."""
        if is_reld(data):
            logger.debug(f"Parsing {self.domain} data as RELD format")
            reader = ReldReader(data)
            return self.parse_tagged(reader, context)
        logger.debug(f"Parsing {self.domain} data as old binary format")
        return self.parse_fixed(data, context)

    def parse_tagged(self, reader: ReldReader, context: DecodeContext) -> Any:
        records = []
        for block in reader.blocks():
            if block.tag == self.block_tag:
                records.append(self.parse_block(block, context))
            else:
                logger.debug(f"Skipping {block.tag!r} block of {block.size} bytes")
        return records

    def parse_fixed(self, data: bytes, context: DecodeContext) -> Any:
        count = len(data) // self.stride
        if count * self.stride < len(data):
            logger.debug(
                f"Ignoring {len(data) - count * self.stride} trailing bytes of "
                f"{self.domain} data (record size {self.stride})"
            )

        records = []
        for i in range(count):
            window = data[i * self.stride:(i + 1) * self.stride]
            record = self.parse_record(window, i, context)
            if getattr(record, 'name', ''):
                records.append(record)
        logger.info(f"Parsed {len(records)} of {count} {self.domain} records from old binary format")
        return records

    def parse_block(self, block: ReldBlock, context: DecodeContext) -> Any:
        raise NotImplementedError("Record decoders must implement parse_block()")

    def parse_record(self, window: bytes, index: int, context: DecodeContext) -> Any:
        raise NotImplementedError("Record decoders must implement parse_record()")

    def parse_struct(self, window: bytes) -> Any:
        """Parse ``window`` with ``legacy_struct``."""
        return self.legacy_struct.parse(window)


def records_to_dicts(records: Optional[List[Any]]) -> Optional[List[Dict[str, Any]]]:
    if records is None:
        return None
    return [record.to_dict() for record in records]
