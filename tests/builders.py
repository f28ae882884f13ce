"""
Byte builders for test fixtures
"""

import struct
from typing import Iterable, List, Optional, Sequence, Tuple


def i32s(*values: int) -> bytes:
    return struct.pack(f'<{len(values)}i', *values)


def i16s(*values: int) -> bytes:
    return struct.pack(f'<{len(values)}h', *values)


def f32s(*values: float) -> bytes:
    return struct.pack(f'<{len(values)}f', *values)


def fixed(text: str, size: int) -> bytes:
    """NUL-padded fixed-width ASCII field"""
    raw = text.encode('ascii')
    return raw + b'\0' * (size - len(raw))


def prefixed(text: str) -> bytes:
    """i32 length followed by the ASCII text"""
    raw = text.encode('ascii')
    return i32s(len(raw)) + raw


def create_reld(blocks: Iterable[Tuple[bytes, bytes]], version: int = 1) -> bytes:
    """Create a RELD stream from (tag, payload) pairs"""
    data = b'RELD' + i32s(version)
    for tag, payload in blocks:
        data += tag + i32s(len(payload)) + payload
    return data


def create_modern_container(lumps: Sequence[Tuple[str, bytes]],
                            lump_count: Optional[int] = None,
                            version: int = 1) -> bytes:
    """Create an RPG! container: header, directory, then payloads"""
    count = len(lumps) if lump_count is None else lump_count
    header = b'RPG!' + i32s(version, count, 16)
    offset = 16 + 44 * len(lumps)
    directory = b''
    payloads = b''
    for name, data in lumps:
        directory += fixed(name, 32) + i32s(offset, len(data), 0)
        payloads += data
        offset += len(data)
    return header + directory + payloads


def encode_legacy_size(size: int) -> bytes:
    """Inverse of the legacy byte-reordered size field"""
    return bytes([(size >> 16) & 0xFF, (size >> 24) & 0xFF, size & 0xFF, (size >> 8) & 0xFF])


def create_legacy_container(lumps: Sequence[Tuple[str, bytes]]) -> bytes:
    data = b''
    for name, payload in lumps:
        data += name.encode('ascii') + b'\0' + encode_legacy_size(len(payload)) + payload
    return data


def create_bsave_raster(width: int, height: int, payload: bytes, magic: int = 0xFD) -> bytes:
    """Create a BSAVE raster.

    Height occupies bytes 10-11 while the payload starts at 11, so the
    first payload byte is replaced by the high byte of ``height``.
    """
    data = bytearray(11 + len(payload))
    data[0] = magic
    data[11:] = payload
    data[8:10] = struct.pack('<h', width)
    data[10:12] = struct.pack('<h', height)
    return bytes(data)


def create_stats(base: int = 1) -> List[int]:
    return [base + i for i in range(8)]


def create_hero_block(name: str, hp: int = 30) -> bytes:
    stats = create_stats()
    stats[0] = hp
    return (
        prefixed(name)
        + i32s(1, 2, 3, 4)
        + i32s(*stats)
        + i32s(3, 10, 20, 30)
        + i32s(2) + f32s(0.5, 1.5)
        + i32s(1) + i32s(7, 8)
    )


def create_legacy_hero(name: str, hp: int = 30) -> bytes:
    """One 256-byte legacy hero record"""
    stats = create_stats()
    stats[0] = hp
    record = (
        fixed(name, 16)
        + i16s(11, 12, 13, 14, 5, 6)
        + i16s(*stats)
        + i16s(*range(96))
        + i16s(21, 22)
        + i16s(1, 2, 3, 4)
        + i16s(1, 1, 0, 1)
    )
    assert len(record) == 256
    return record


def create_enemy_block(name: str, attacks: int = 1) -> bytes:
    data = (
        prefixed(name)
        + i32s(5, 6, 7, 8)
        + i32s(*create_stats(10))
        + i32s(1, 50, 60, 100, 25, 3)
        + f32s(0.25)
        + i32s(2) + f32s(1.0, 2.0)
        + i32s(attacks)
    )
    for i in range(attacks):
        data += i32s(i, 10, 90, 2, 0)
    return data


def create_legacy_enemy(name: str) -> bytes:
    record = (
        fixed(name, 32)
        + i32s(5, 6, 7, 8)
        + i32s(*create_stats(10))
        + i32s(2, 50, 60, 100, 25, 3)
        + f32s(0.5)
        + f32s(*[1.0] * 7)
        + i32s(4, 5, 6, 7)
    )
    return record + b'\0' * (160 - len(record))


def create_legacy_map_header(width: int, height: int, layers: int = 2, tileset: int = 0,
                             stride: int = 32) -> bytes:
    header = i16s(width, height, layers, 0, 0, tileset)
    return header[:stride] + b'\0' * max(0, stride - len(header))
