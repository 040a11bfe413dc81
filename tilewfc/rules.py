import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence, Union

import numpy as np

from .directions import Direction
from .errors import SampleIOError, SampleParseError

logger = logging.getLogger(__name__)

Sample = List[List[int]]

# Tile types are stored in int64 arrays
MAX_TILE_TYPE = np.iinfo(np.int64).max


def _empty_neighbor_rules() -> Dict[Direction, List[int]]:
    return {direction: [] for direction in Direction}


@dataclass
class Rule:
    """
    What a tile type allows around it, learned from a sample grid.

    Attributes:
        frequency: Number of occurrences of the tile type in the sample
        neighbor_rules: Tile types observed next to this one, per direction,
            in first-observation order without duplicates
    """
    frequency: int
    neighbor_rules: Dict[Direction, List[int]] = field(default_factory=_empty_neighbor_rules)

    def allows(self, direction: Direction, tile_type: int) -> bool:
        return tile_type in self.neighbor_rules[direction]


def parse_sample(text: str) -> Sample:
    """
    Parse a sample grid: one row per line, tile types separated by spaces.

    Blank lines are skipped. Rows are not required to have equal length.

    Raises:
        SampleParseError: If a token is not a non-negative integer or the
            sample holds no tiles at all
    """
    sample = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        row = []
        for col_no, token in enumerate(line.split(), start=1):
            if not (token.isascii() and token.isdigit()):
                raise SampleParseError(f"invalid tile type {token!r}", line=line_no, column=col_no)
            tile = int(token)
            if tile > MAX_TILE_TYPE:
                raise SampleParseError(f"tile type {token} is larger than {MAX_TILE_TYPE}", line=line_no, column=col_no)
            row.append(tile)
        sample.append(row)

    if not sample:
        raise SampleParseError("sample grid is empty")
    return sample


def load_sample(path: Union[str, Path]) -> Sample:
    """Read and parse a sample grid file"""
    try:
        with open(path, "r") as f:
            text = f.read()
    except OSError as e:
        raise SampleIOError(f"could not read sample {str(path)!r}: {e}") from e
    logger.debug("Loaded sample from %s", path)
    return parse_sample(text)


def learn_rules(sample: Sequence[Sequence[int]]) -> Dict[int, Rule]:
    """
    Learn one Rule per tile type from a sample grid.

    Args:
        sample: Rows of tile types

    Returns:
        dict: Mapping from tile type to its Rule, ordered by tile type
    """
    # Pass 1: frequencies
    freqs = Counter(int(tile) for line in sample for tile in line)

    # Pass 2: neighbours seen in each direction, no wraparound
    rules: Dict[int, Rule] = {}
    height = len(sample)
    for row, line in enumerate(sample):
        for col, tile in enumerate(line):
            tile = int(tile)
            rule = rules.get(tile)
            if rule is None:
                rule = rules[tile] = Rule(frequency=freqs[tile])

            for direction in Direction:
                d_row, d_col = direction.offset
                n_row, n_col = row + d_row, col + d_col
                if not (0 <= n_row < height and 0 <= n_col < len(sample[n_row])):
                    continue
                neighbor = int(sample[n_row][n_col])
                allowed = rule.neighbor_rules[direction]
                if neighbor not in allowed:
                    allowed.append(neighbor)

    return {tile: rules[tile] for tile in sorted(rules)}


class RuleTable:
    """
    Learned rules compiled into numpy arrays indexed by tile position.

    Tile types are kept sorted; everywhere else in the package a tile is
    referred to by its index into `tile_types`.
    """
    def __init__(self, rules: Dict[int, Rule]) -> None:
        if not rules:
            raise ValueError("a rule table needs at least one tile type")

        self.rules = {tile: rules[tile] for tile in sorted(rules)}
        self.tile_types = np.array(list(self.rules), dtype=np.int64)
        self.num_tiles = len(self.tile_types)
        self.tile_to_index = {int(tile): idx for idx, tile in enumerate(self.tile_types)}
        self.frequencies = np.array([rule.frequency for rule in self.rules.values()], dtype=np.float64)

        # adjacency[a, d, b]: tile b may sit in direction d of tile a
        self.adjacency = np.zeros((self.num_tiles, len(Direction), self.num_tiles), dtype=bool)
        for tile, rule in self.rules.items():
            tile_idx = self.tile_to_index[tile]
            for direction, allowed in rule.neighbor_rules.items():
                for neighbor in allowed:
                    neighbor_idx = self.tile_to_index.get(neighbor)
                    if neighbor_idx is not None:
                        self.adjacency[tile_idx, direction, neighbor_idx] = True

    @classmethod
    def from_sample(cls, sample: Sequence[Sequence[int]]) -> "RuleTable":
        return cls(learn_rules(sample))

    def __contains__(self, tile_type: int) -> bool:
        return tile_type in self.tile_to_index

    def index_of(self, tile_type: int) -> int:
        return self.tile_to_index[tile_type]

    def to_rules(self) -> Dict[int, Rule]:
        return dict(self.rules)


def format_rules(rules: Dict[int, Rule]) -> str:
    """Human readable listing of learned rules"""
    lines = []
    for tile, rule in rules.items():
        lines.append(f"{tile} (frequency {rule.frequency}):")
        for direction in Direction:
            allowed = rule.neighbor_rules[direction]
            lines.append(f"  {direction.name}: {allowed}")
    return "\n".join(lines)
