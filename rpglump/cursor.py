"""Bounds-checked reader over an in-memory blob."""
from typing import List, Tuple
import struct

from .errors import CursorError


class ByteCursor:
    """Forward and random-access reader over immutable bytes.

    Every read checks bounds first and raises CursorError instead of
    returning short data. All multi-byte values are little-endian.
    """

    def __init__(self, data: bytes, offset: int = 0):
        self.data = bytes(data)
        self._pos = 0
        self.seek(offset)

    def __len__(self) -> int:
        return len(self.data)

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self.data) - self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self.data)

    def seek(self, offset: int) -> None:
        if offset < 0 or offset > len(self.data):
            raise CursorError(f"Seek to {offset} outside blob of {len(self.data)} bytes")
        self._pos = offset

    def skip(self, count: int) -> None:
        self.seek(self._pos + count)

    def _take(self, count: int) -> bytes:
        if count < 0:
            raise CursorError(f"Negative read length {count} at offset {self._pos}")
        end = self._pos + count
        if end > len(self.data):
            raise CursorError(
                f"Read of {count} bytes at offset {self._pos} "
                f"overruns blob of {len(self.data)} bytes"
            )
        chunk = self.data[self._pos:end]
        self._pos = end
        return chunk

    def _unpack(self, fmt: str):
        size = struct.calcsize(fmt)
        return struct.unpack(fmt, self._take(size))[0]

    def read_bytes(self, count: int) -> bytes:
        return self._take(count)

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_bool(self) -> bool:
        return self._take(1)[0] != 0

    def read_i16(self) -> int:
        return self._unpack('<h')

    def read_u16(self) -> int:
        return self._unpack('<H')

    def read_i32(self) -> int:
        return self._unpack('<i')

    def read_u32(self) -> int:
        return self._unpack('<I')

    def read_i64(self) -> int:
        return self._unpack('<q')

    def read_f32(self) -> float:
        return self._unpack('<f')

    def read_i32_array(self, count: int) -> List[int]:
        if count < 0:
            raise CursorError(f"Negative array length {count} at offset {self._pos}")
        return list(struct.unpack(f'<{count}i', self._take(count * 4)))

    def read_f32_array(self, count: int) -> List[float]:
        if count < 0:
            raise CursorError(f"Negative array length {count} at offset {self._pos}")
        return list(struct.unpack(f'<{count}f', self._take(count * 4)))

    def read_fixed_string(self, size: int) -> str:
        """Read a fixed-width ASCII field, cut at the first NUL."""
        return decode_fixed_string(self._take(size))

    def read_c_string(self, limit: int = 0) -> Tuple[str, bool]:
        """Read a NUL-terminated string, one character per byte.

        Returns:
            Tuple of (string, terminated). ``terminated`` is False when the
            blob ended (or ``limit`` was hit) before a NUL was found.
        """
        end = self.data.find(b'\0', self._pos)
        if end == -1:
            raw = self.data[self._pos:]
            self._pos = len(self.data)
            return raw.decode('latin-1'), False
        if limit and end - self._pos > limit:
            raw = self.data[self._pos:self._pos + limit]
            self._pos += limit
            return raw.decode('latin-1'), False
        raw = self.data[self._pos:end]
        self._pos = end + 1
        return raw.decode('latin-1'), True

    def sub_cursor(self, length: int) -> 'ByteCursor':
        """Consume ``length`` bytes and return a cursor limited to them."""
        return ByteCursor(self._take(length))


def decode_fixed_string(raw: bytes) -> str:
    """Decode a NUL-padded ASCII field and trim trailing NUL/whitespace."""
    return raw.split(b'\0', 1)[0].decode('ascii', 'replace').rstrip('\0 \t\r\n')
