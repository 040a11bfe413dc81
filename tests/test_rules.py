"""
Unit tests for sample parsing and rule learning.
"""

import numpy as np
import pytest

from tilewfc.directions import Direction
from tilewfc.errors import SampleIOError, SampleParseError
from tilewfc.rules import Rule, RuleTable, format_rules, learn_rules, load_sample, parse_sample


class TestParseSample:
    def test_rows_and_columns(self):
        assert parse_sample("0 1 2\n3 4 5\n") == [[0, 1, 2], [3, 4, 5]]

    def test_blank_lines_skipped(self):
        assert parse_sample("\n0 1\n\n1 0\n\n") == [[0, 1], [1, 0]]

    def test_ragged_rows_kept(self):
        assert parse_sample("0 1 2\n3\n") == [[0, 1, 2], [3]]

    def test_non_integer_token(self):
        with pytest.raises(SampleParseError) as exc_info:
            parse_sample("0 1\n1 x\n")
        assert exc_info.value.line == 2
        assert exc_info.value.column == 2

    def test_negative_token(self):
        with pytest.raises(SampleParseError):
            parse_sample("0 -1\n")

    def test_tile_type_too_large(self):
        with pytest.raises(SampleParseError) as exc_info:
            parse_sample(f"0 {2 ** 63}\n")
        assert (exc_info.value.line, exc_info.value.column) == (1, 2)

    def test_largest_tile_type(self):
        assert parse_sample(f"{2 ** 63 - 1}\n") == [[2 ** 63 - 1]]

    def test_empty_sample(self):
        with pytest.raises(SampleParseError):
            parse_sample("\n\n")

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_sample("a")


class TestLoadSample:
    def test_load_file(self, sample_file):
        path = sample_file("0 1\n1 0\n")
        assert load_sample(path) == [[0, 1], [1, 0]]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SampleIOError):
            load_sample(tmp_path / "missing.txt")

    def test_io_error_is_os_error(self, tmp_path):
        with pytest.raises(OSError):
            load_sample(tmp_path / "missing.txt")

    def test_terrain_sample_loads(self, terrain_sample_path):
        sample = load_sample(terrain_sample_path)
        assert len(sample) == 9
        assert all(len(row) == 10 for row in sample)


class TestLearnRules:
    def test_checkerboard(self, checkerboard_sample):
        rules = learn_rules(checkerboard_sample)

        assert list(rules) == [0, 1]
        assert rules[0].frequency == 2
        assert rules[1].frequency == 2
        for direction in Direction:
            assert rules[0].neighbor_rules[direction] == [1]
            assert rules[1].neighbor_rules[direction] == [0]

    def test_boundary_leaves_empty_directions(self):
        rules = learn_rules([[0, 1, 0]])

        assert rules[0].frequency == 2
        assert rules[0].neighbor_rules[Direction.NORTH] == []
        assert rules[0].neighbor_rules[Direction.SOUTH] == []
        assert rules[0].neighbor_rules[Direction.EAST] == [1]
        assert rules[0].neighbor_rules[Direction.WEST] == [1]
        assert rules[1].neighbor_rules[Direction.EAST] == [0]

    def test_neighbors_deduplicated(self, stripes_sample):
        rules = learn_rules(stripes_sample)

        assert rules[0].neighbor_rules[Direction.EAST] == [0]
        assert rules[0].neighbor_rules[Direction.SOUTH] == [1]
        assert rules[1].neighbor_rules[Direction.NORTH] == [0]
        assert rules[1].neighbor_rules[Direction.SOUTH] == [0]

    def test_no_wraparound(self):
        rules = learn_rules([[0, 1]])
        assert rules[0].neighbor_rules[Direction.WEST] == []
        assert rules[1].neighbor_rules[Direction.EAST] == []

    def test_first_observation_order(self):
        rules = learn_rules([[5, 2, 5, 9, 5]])
        assert rules[5].neighbor_rules[Direction.EAST] == [2, 9]
        assert rules[5].neighbor_rules[Direction.WEST] == [2, 9]

    def test_ragged_rows(self):
        # Row 1 has no column 2, so the 2 in row 0 has no southern neighbour
        rules = learn_rules([[0, 1, 2], [3]])
        assert rules[2].neighbor_rules[Direction.SOUTH] == []
        assert rules[0].neighbor_rules[Direction.SOUTH] == [3]
        assert rules[3].neighbor_rules[Direction.NORTH] == [0]

    def test_keys_sorted(self):
        rules = learn_rules([[7, 3, 5]])
        assert list(rules) == [3, 5, 7]

    def test_pure(self, terrain_sample_path):
        sample = load_sample(terrain_sample_path)
        assert learn_rules(sample) == learn_rules(sample)

    def test_numpy_input(self):
        rules = learn_rules(np.array([[0, 1], [1, 0]]))
        assert rules[0].neighbor_rules[Direction.SOUTH] == [1]
        assert all(isinstance(tile, int) for tile in rules)


class TestRuleTable:
    def test_arrays(self, checkerboard_table):
        table = checkerboard_table

        assert table.num_tiles == 2
        assert table.tile_types.tolist() == [0, 1]
        assert table.frequencies.tolist() == [2.0, 2.0]
        assert table.adjacency.shape == (2, 4, 2)
        assert table.adjacency[0, Direction.EAST].tolist() == [False, True]
        assert table.adjacency[1, Direction.NORTH].tolist() == [True, False]

    def test_sparse_tile_types(self):
        table = RuleTable.from_sample([[10, 3], [3, 10]])
        assert table.tile_types.tolist() == [3, 10]
        assert table.index_of(10) == 1
        assert 3 in table
        assert 4 not in table

    def test_adjacency_not_symmetrised(self):
        rules = {
            0: Rule(frequency=1, neighbor_rules={d: [] for d in Direction}),
            1: Rule(frequency=1, neighbor_rules={d: [] for d in Direction}),
        }
        rules[0].neighbor_rules[Direction.EAST].append(1)
        table = RuleTable(rules)

        assert table.adjacency[0, Direction.EAST, 1]
        assert not table.adjacency[1, Direction.WEST, 0]

    def test_round_trip_rules(self, checkerboard_sample):
        rules = learn_rules(checkerboard_sample)
        assert RuleTable(rules).to_rules() == rules

    def test_empty_rules(self):
        with pytest.raises(ValueError):
            RuleTable({})


def test_format_rules(checkerboard_sample):
    text = format_rules(learn_rules(checkerboard_sample))
    assert "0 (frequency 2):" in text
    assert "  NORTH: [1]" in text
