"""
Tests for project ingestion
"""

import pytest

from rpglump.constants import DecoderLimits
from rpglump.container import ContainerFormat, LumpStore, decode_legacy_size, detect_container_format
from rpglump.errors import LumpNotFoundError

from tests.builders import (
    create_legacy_container, create_modern_container, encode_legacy_size, fixed, i32s,
)


class TestFormatDetection:
    def test_directory(self, tmp_path):
        assert detect_container_format(tmp_path) == ContainerFormat.DIRECTORY

    def test_modern_magic(self, tmp_path):
        path = tmp_path / "game.rpg"
        path.write_bytes(create_modern_container([]))
        assert detect_container_format(path) == ContainerFormat.MODERN

    def test_anything_else_is_legacy(self, tmp_path):
        path = tmp_path / "game.rpg"
        path.write_bytes(b'GAME.GEN\0')
        assert detect_container_format(path) == ContainerFormat.LEGACY

    def test_missing_path(self, tmp_path):
        with pytest.raises(LumpNotFoundError):
            detect_container_format(tmp_path / "nope.rpg")


class TestDirectoryIngestion:
    def test_one_lump_per_file(self, make_project_dir):
        root = make_project_dir({
            "heroes.reld": b'a',
            "GAME.GEN": b'bb',
            "graphics/tileset001.rgfx": b'ccc',
        })
        store = LumpStore()
        assert store.ingest(root) == 3
        assert sorted(store.names()) == ["GAME.GEN", "graphics/tileset001.rgfx", "heroes.reld"]
        assert store.get("graphics/tileset001.rgfx") == b'ccc'
        assert store.container_format == ContainerFormat.DIRECTORY

    def test_ingest_clears_previous_project(self, make_project_dir):
        store = LumpStore()
        store.ingest(make_project_dir({"a.bin": b'1'}, name="first"))
        store.ingest(make_project_dir({"b.bin": b'2'}, name="second"))
        assert store.names() == ["b.bin"]

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(LumpNotFoundError):
            LumpStore().ingest(tmp_path / "missing")


class TestModernContainer:
    def test_reads_all_lumps(self, tmp_path):
        path = tmp_path / "game.rpg"
        path.write_bytes(create_modern_container([
            ("general.reld", b'GENERAL'),
            ("heroes.reld", b'HEROES!!'),
        ]))
        store = LumpStore()
        assert store.ingest(path) == 2
        assert store.get("general.reld") == b'GENERAL'
        assert store.size("heroes.reld") == 8
        assert store.errors == []

    def test_later_duplicate_wins(self, tmp_path):
        path = tmp_path / "game.rpg"
        path.write_bytes(create_modern_container([("a", b'old'), ("a", b'new')]))
        store = LumpStore()
        store.ingest(path)
        assert store.get("a") == b'new'

    def test_absurd_lump_count_keeps_nothing(self, tmp_path):
        path = tmp_path / "game.rpg"
        path.write_bytes(create_modern_container([("a", b'x')], lump_count=0x7FFFFFFF))
        store = LumpStore()
        assert store.ingest(path) == 0
        assert len(store.errors) == 1

    def test_lump_count_above_limit(self, tmp_path):
        path = tmp_path / "game.rpg"
        path.write_bytes(create_modern_container([("a", b'x'), ("b", b'y')]))
        store = LumpStore(DecoderLimits(max_lumps=1))
        assert store.ingest(path) == 0
        assert store.errors

    def test_out_of_bounds_entry_stops_at_last_good(self, tmp_path):
        data = bytearray(create_modern_container([("a", b'xx'), ("b", b'yy')]))
        # point the second entry's size far past the end of the file
        size_offset = 16 + 44 + 36
        data[size_offset:size_offset + 4] = i32s(1000)
        path = tmp_path / "game.rpg"
        path.write_bytes(bytes(data))
        store = LumpStore()
        assert store.ingest(path) == 1
        assert store.get("a") == b'xx'
        assert "b" not in store
        assert store.errors

    def test_truncated_directory(self, tmp_path):
        path = tmp_path / "game.rpg"
        path.write_bytes(b'RPG!' + i32s(1, 3, 16) + fixed("a", 32) + i32s(16, 0, 0))
        store = LumpStore()
        assert store.ingest(path) == 1
        assert store.get("a") == b''
        assert store.errors


class TestLegacyContainer:
    def test_size_byte_order(self):
        assert decode_legacy_size(0x01, 0x00, 0x00, 0x00) == 0x010000
        assert decode_legacy_size(0x00, 0x01, 0x00, 0x00) == 0x01000000
        assert decode_legacy_size(0x00, 0x00, 0x01, 0x00) == 0x01
        assert decode_legacy_size(0x00, 0x00, 0x00, 0x01) == 0x0100

    def test_size_is_signed(self):
        assert decode_legacy_size(0x00, 0x80, 0x00, 0x00) < 0

    def test_encoded_sizes_decode(self):
        assert decode_legacy_size(*encode_legacy_size(70000)) == 70000

    def test_reads_stream(self, tmp_path):
        path = tmp_path / "vikings.rpg"
        path.write_bytes(create_legacy_container([
            ("VIKING.GEN", b'\x01\x02'),
            ("VIKING.DT0", b'\x03' * 300),
        ]))
        store = LumpStore()
        assert store.ingest(path) == 2
        assert store.get("VIKING.DT0") == b'\x03' * 300
        assert store.container_format == ContainerFormat.LEGACY

    def test_non_ascii_names_stay_distinct(self, tmp_path):
        data = b''
        for raw_name, payload in ((b'MAP\xe9', b'one'), (b'MAP\xe8', b'two')):
            data += raw_name + b'\0' + encode_legacy_size(len(payload)) + payload
        path = tmp_path / "game.rpg"
        path.write_bytes(data)
        store = LumpStore()
        assert store.ingest(path) == 2
        assert store.get("MAP\u00e9") == b'one'
        assert store.get("MAP\u00e8") == b'two'

    def test_empty_name_ends_stream(self, tmp_path):
        path = tmp_path / "game.rpg"
        path.write_bytes(create_legacy_container([("A", b'1')]) + b'\0garbage')
        store = LumpStore()
        assert store.ingest(path) == 1
        assert store.errors == []

    def test_truncated_stream_keeps_lumps_read(self, tmp_path):
        good = create_legacy_container([("A", b'1234'), ("B", b'5678')])
        truncated = good + b'C\0' + encode_legacy_size(100) + b'short'
        path = tmp_path / "game.rpg"
        path.write_bytes(truncated)
        store = LumpStore()
        assert store.ingest(path) == 2
        assert store.names() == ["A", "B"]
        assert len(store.errors) == 1

    def test_negative_size_stops(self, tmp_path):
        path = tmp_path / "game.rpg"
        path.write_bytes(create_legacy_container([("A", b'1')]) + b'B\0' + bytes([0, 0x80, 0, 0]))
        store = LumpStore()
        assert store.ingest(path) == 1
        assert store.errors

    def test_overlong_name_stops(self, tmp_path):
        path = tmp_path / "game.rpg"
        path.write_bytes(create_legacy_container([("A", b'1'), ("N" * 40, b'2')]))
        store = LumpStore(DecoderLimits(max_name_length=16))
        assert store.ingest(path) == 1
