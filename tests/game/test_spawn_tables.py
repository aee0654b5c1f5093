"""Tests for spawn tables and region spawning."""

from __future__ import annotations

from collections import Counter

import pytest

from warrens import config
from warrens.environment.map import GameMap
from warrens.environment.tile_types import TileTypeID
from warrens.game.spawn_tables import room_table, spawn_region, spawn_room
from warrens.types import SpawnEntry
from warrens.util.coordinates import Rect
from warrens.util.rng import RNG, RNGProvider


class TestRoomTable:
    def test_depth_scaled_weights(self) -> None:
        shallow = dict(room_table(1))
        deep = dict(room_table(6))

        assert shallow["Orc"] == 2
        assert deep["Orc"] == 7
        assert shallow["Goblin"] == deep["Goblin"] == 10

    def test_heavy_gear_is_out_of_reach_on_level_one(self) -> None:
        table = dict(room_table(1))

        assert table["Longsword"] == 0
        assert table["Tower Shield"] == 0


class TestSpawnRegion:
    def test_picks_distinct_cells_from_area(self, rng: RNG) -> None:
        area = list(range(100, 200))
        for _ in range(50):
            spawns: list[SpawnEntry] = []
            spawn_region(rng, area, 5, spawns)

            cells = [idx for idx, _ in spawns]
            assert len(cells) == len(set(cells))
            assert set(cells) <= set(area)

    def test_count_follows_depth_formula(self, rng: RNG) -> None:
        """roll_dice(1, MAX_MONSTERS + 3) + depth - 4 spawns, never negative."""
        area = list(range(500))
        depth = 3
        high = config.MAX_MONSTERS + 3 + depth - 4
        counts = set()
        for _ in range(200):
            spawns: list[SpawnEntry] = []
            spawn_region(rng, area, depth, spawns)
            counts.add(len(spawns))

        assert counts <= set(range(high + 1))
        assert 0 in counts
        assert high in counts

    def test_capped_by_area_size(self, rng: RNG) -> None:
        area = [7, 8]
        for _ in range(20):
            spawns: list[SpawnEntry] = []
            spawn_region(rng, area, 10, spawns)
            assert sorted(idx for idx, _ in spawns) == [7, 8]

    def test_empty_area_spawns_nothing(self, rng: RNG) -> None:
        spawns: list[SpawnEntry] = []

        spawn_region(rng, [], 10, spawns)

        assert spawns == []

    def test_zero_weight_entries_never_drawn(self) -> None:
        rng = RNGProvider(2024).get("test.spawns")
        names: Counter[str] = Counter()
        for _ in range(300):
            spawns: list[SpawnEntry] = []
            spawn_region(rng, list(range(50)), 1, spawns)
            names.update(name for _, name in spawns)

        assert names
        assert "Longsword" not in names
        assert "Tower Shield" not in names

    def test_appends_without_clearing(self, rng: RNG) -> None:
        spawns: list[SpawnEntry] = [(1, "Door")]

        spawn_region(rng, list(range(10, 60)), 10, spawns)

        assert spawns[0] == (1, "Door")
        assert len(spawns) > 1

    def test_same_seed_same_spawns(self) -> None:
        results = []
        for _ in range(2):
            rng = RNGProvider(8).get("test.spawns")
            spawns: list[SpawnEntry] = []
            spawn_region(rng, list(range(40)), 6, spawns)
            results.append(spawns)

        assert results[0] == results[1]


class TestSpawnRoom:
    @pytest.fixture
    def game_map(self) -> GameMap:
        game_map = GameMap(1, 20, 12)
        game_map.tiles[2:10, 2:8] = TileTypeID.FLOOR
        return game_map

    def test_passes_interior_floor_in_scan_order(
        self, rng: RNG, game_map: GameMap
    ) -> None:
        room = Rect(1, 1, 9, 7)
        seen: list[list[int]] = []

        def record(rng: RNG, area: list[int], depth: int, spawn_list: list) -> None:
            seen.append(area)

        spawn_room(game_map, rng, room, 1, [], record)

        expected = [game_map.xy_idx(x, y) for y in range(2, 8) for x in range(2, 10)]
        assert seen == [expected]

    def test_outline_cells_are_excluded(self, rng: RNG, game_map: GameMap) -> None:
        room = Rect(2, 2, 7, 5)
        seen: list[list[int]] = []

        def record(rng: RNG, area: list[int], depth: int, spawn_list: list) -> None:
            seen.append(area)

        spawn_room(game_map, rng, room, 1, [], record)

        xs = {game_map.idx_xy(idx)[0] for idx in seen[0]}
        ys = {game_map.idx_xy(idx)[1] for idx in seen[0]}
        assert xs == set(range(3, 9))
        assert ys == set(range(3, 7))
