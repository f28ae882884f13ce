"""
Tests for tile, zone and NPC raster resolution
"""

import numpy as np
import pytest

from rpglump.constants import DecoderLimits
from rpglump.container import LumpStore
from rpglump.errors import DimensionOutOfRangeError
from rpglump.models import CHANNEL_NPCS, CHANNEL_TILES, CHANNEL_ZONES, MapData, clamp_dimensions
from rpglump.tiles import (
    CompactHeaderRaster, HeadlessRaster, TaggedRaster, TileFormatResolver, check_dimensions,
    map_lump_name, parse_npc_placements,
)

from tests.builders import create_bsave_raster, i16s


def make_map(width: int = 16, height: int = 10, layers: int = 2) -> MapData:
    map_data = MapData(width=width, height=height, layer_count=layers)
    map_data.allocate()
    return map_data


def assert_consistent(map_data: MapData) -> None:
    cells = map_data.width * map_data.height
    assert len(map_data.layers) == map_data.layer_count
    for layer in map_data.layers:
        assert layer.shape == (map_data.height, map_data.width)
    assert map_data.tiles.size == cells
    assert map_data.passability.size == cells


def store_with(project_dir) -> LumpStore:
    store = LumpStore()
    store.ingest(project_dir)
    return store


class TestMapData:
    def test_allocate_defaults(self):
        map_data = make_map()
        assert_consistent(map_data)
        assert np.all(map_data.tiles == 1)
        assert np.all(map_data.passability == 1)

    def test_resize_reallocates_everything(self):
        map_data = make_map()
        map_data.resize(40, 30)
        assert_consistent(map_data)

    def test_clamp_dimensions(self):
        assert clamp_dimensions(0, 40000) == (50, 50)
        assert clamp_dimensions(4, 4) == (16, 10)
        assert clamp_dimensions(64, 48) == (64, 48)


class TestDimensionCheck:
    @pytest.mark.parametrize("width, height", [(15, 10), (16, 9), (32769, 10), (16, 40000)])
    def test_out_of_range(self, width, height):
        with pytest.raises(DimensionOutOfRangeError):
            check_dimensions(width, height)

    def test_bounds_are_inclusive(self):
        check_dimensions(16, 10)
        check_dimensions(16, 32768)


class TestTileStrategies:
    def test_bsave_resizes_map_to_raster(self):
        width, height = 20, 12
        layer0 = bytes(range(240))
        layer1 = bytes([7]) * 240
        data = create_bsave_raster(width, height, layer0 + layer1)
        map_data = make_map()

        assert TaggedRaster().validate(map_data, data)
        TaggedRaster().decode(map_data, data)

        assert (map_data.width, map_data.height) == (20, 12)
        assert_consistent(map_data)
        # byte 11 doubles as the high byte of the height field
        assert map_data.layers[0][0, 0] == 0
        assert map_data.layers[0][0, 5] == 5
        assert map_data.layers[0][1, 0] == 20
        assert np.all(map_data.layers[1] == 7)
        assert map_data.tiles[21] == 21

    def test_bsave_fills_only_existing_layers(self):
        data = create_bsave_raster(16, 10, bytes([2]) * 160 * 3)
        map_data = make_map(layers=1)
        TaggedRaster().decode(map_data, data)
        assert len(map_data.layers) == 1

    def test_bsave_rejects_other_prefix(self):
        data = create_bsave_raster(16, 10, bytes(160), magic=0xFE)
        assert not TaggedRaster().validate(make_map(), data)

    def test_bsave_needs_a_full_layer(self):
        data = create_bsave_raster(16, 10, bytes(100))
        assert not TaggedRaster().validate(make_map(), data)

    def test_bsave_resize_beyond_grid_budget_rejected(self):
        data = create_bsave_raster(200, 100, bytes(200 * 100))
        strategy = TaggedRaster(DecoderLimits(max_map_bytes=100_000))
        with pytest.raises(DimensionOutOfRangeError):
            strategy.validate(make_map(), data)
        map_data = make_map()
        resolver = TileFormatResolver(DecoderLimits(max_map_bytes=100_000))
        assert resolver.apply(resolver.tile_strategies, map_data, data) == "raw"
        assert (map_data.width, map_data.height) == (16, 10)

    def test_bsave_bad_dimensions_raise(self):
        data = create_bsave_raster(8, 8, bytes(64))
        with pytest.raises(DimensionOutOfRangeError):
            TaggedRaster().validate(make_map(), data)

    def test_headerless_uses_map_dimensions(self):
        map_data = make_map()
        data = bytes([3]) * 160
        assert HeadlessRaster().validate(map_data, data)
        HeadlessRaster().decode(map_data, data)
        assert np.all(map_data.layers[0] == 3)
        assert np.all(map_data.layers[1] == 1)
        assert not HeadlessRaster().validate(map_data, data[:159])

    def test_compact_header_partial_payload(self):
        data = i16s(20, 12) + bytes([9]) * 30
        map_data = make_map()
        assert CompactHeaderRaster().validate(map_data, data)
        CompactHeaderRaster().decode(map_data, data)
        assert (map_data.width, map_data.height) == (20, 12)
        assert_consistent(map_data)
        assert map_data.tiles[:30].tolist() == [9] * 30
        assert map_data.tiles[30] == 1


class TestResolver:
    def test_lump_names(self):
        assert map_lump_name("GAME", "E", 3) == "GAME.E03"
        assert map_lump_name("VIKING", "L", 12) == "VIKING.L12"

    def test_fe_prefix_falls_through_to_headerless(self):
        map_data = make_map()
        data = create_bsave_raster(16, 10, bytes([4]) * 160, magic=0xFE)
        resolver = TileFormatResolver()
        assert resolver.apply(resolver.tile_strategies, map_data, data) == "raw"

    def test_bad_dimensions_fall_through(self):
        map_data = make_map()
        data = create_bsave_raster(8, 8, bytes(64))
        resolver = TileFormatResolver()
        # too short for raw, and the compact reading gives 253x0
        assert resolver.apply(resolver.tile_strategies, map_data, data) is None

    def test_all_channels(self, make_project_dir):
        zones = bytearray(20 * 12)
        zones[1] = 5
        npcs = bytes(11) + i16s(1, 1, 9, 0) + i16s(50, 1, 9, 0) + i16s(3, 11, 2, 1)
        store = store_with(make_project_dir({
            "GAME.E00": create_bsave_raster(20, 12, bytes([6]) * 240 * 2),
            "GAME.Z00": create_bsave_raster(20, 12, bytes(zones)),
            "GAME.L00": npcs,
        }))
        map_data = TileFormatResolver().resolve(make_map(), 0, store, "GAME")

        assert_consistent(map_data)
        assert map_data.defaulted_channels == []
        assert map_data.tiles[1] == 6
        assert map_data.passability[0] == 1
        assert map_data.passability[1] == 0
        assert [(n.x, n.y) for n in map_data.npcs] == [(1, 1), (3, 11)]

    def test_missing_channels_keep_defaults(self, make_project_dir):
        store = store_with(make_project_dir({"other.bin": b''}))
        map_data = TileFormatResolver().resolve(make_map(), 4, store, "GAME")
        assert map_data.defaulted_channels == [CHANNEL_TILES, CHANNEL_ZONES, CHANNEL_NPCS]
        assert np.all(map_data.tiles == 1)
        assert np.all(map_data.passability == 1)

    def test_unparseable_tiles_are_reported(self, make_project_dir):
        store = store_with(make_project_dir({"GAME.E00": b'\x01\x00'}))
        map_data = TileFormatResolver().resolve(make_map(), 0, store, "GAME")
        assert CHANNEL_TILES in map_data.defaulted_channels
        assert_consistent(map_data)

    def test_zone_raster_resize_resets_tiles(self, make_project_dir):
        store = store_with(make_project_dir({
            "GAME.E00": bytes([2]) * 160,
            "GAME.Z00": create_bsave_raster(32, 20, bytes(640)),
        }))
        map_data = TileFormatResolver().resolve(make_map(), 0, store, "GAME")
        assert (map_data.width, map_data.height) == (32, 20)
        assert_consistent(map_data)
        assert CHANNEL_TILES in map_data.defaulted_channels


class TestNpcPlacements:
    def test_out_of_bounds_dropped(self):
        map_data = make_map()
        data = bytes(11) + i16s(0, 0, 1, 1) + i16s(-1, 0, 1, 1) + i16s(15, 9, 2, 0) + i16s(16, 0, 1, 1)
        npcs = parse_npc_placements(map_data, data)
        assert [(n.x, n.y, n.picture) for n in npcs] == [(0, 0, 1), (15, 9, 2)]

    def test_at_most_300(self):
        data = bytes(11) + i16s(1, 1, 0, 0) * 400
        assert len(parse_npc_placements(make_map(), data)) == 300

    def test_short_lump(self):
        assert parse_npc_placements(make_map(), bytes(15)) == []
