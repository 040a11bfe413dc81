import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Union

import numpy as np

from .config import GenerationConfig
from .errors import ConfigError, GenerationCancelled, UnsolvableError
from .grid import Grid, Seed
from .rules import Rule, RuleTable, load_sample
from .sampler import RandomSource
from .wfc import WFC, SolveStats, Status

logger = logging.getLogger(__name__)

SampleSource = Union[str, Path, Sequence[Sequence[int]]]


@dataclass
class GenerationResult:
    grid: np.ndarray
    rules: Dict[int, Rule]
    stats: SolveStats


def generate(
    sample: SampleSource,
    height: int,
    width: int,
    seeds: Optional[Sequence[Seed]] = None,
    rng: Optional[Union[int, RandomSource]] = None,
    strict_seeds: bool = False,
    cancel: Optional[Callable[[], bool]] = None,
    time_limit: Optional[float] = None,
) -> GenerationResult:
    """
    Learn rules from a sample and collapse a fresh height x width grid.

    Args:
        sample: Path to a sample file, or rows of tile types
        height: Number of rows to generate
        width: Number of columns to generate
        seeds: (tile_type, (row, col)) pairs collapsed before solving
        rng: Seed or numpy random source; the same seed gives the same grid
        strict_seeds: Raise on out of bounds seeds instead of skipping them
        cancel: Stop request, see WFC
        time_limit: Seconds before the run is cancelled

    Returns:
        GenerationResult: The collapsed grid of tile types with the learned
            rules and solver statistics

    Raises:
        SampleIOError, SampleParseError: If the sample cannot be used
        InvalidSeedError: For unusable seeds
        UnsolvableError: If no complete grid exists from the seeded start
        GenerationCancelled: If stopped by cancel or time_limit
    """
    if isinstance(sample, (str, Path)):
        sample = load_sample(sample)
    rule_table = RuleTable.from_sample(sample)
    logger.info(
        "Learned %d tile types; generating %dx%d grid with %d seeds",
        rule_table.num_tiles, height, width, len(seeds or ()),
    )

    grid = Grid.initialize(height, width, rule_table, seeds=seeds, strict_seeds=strict_seeds)
    wfc = WFC(grid, rng=rng, cancel=cancel, time_limit=time_limit)
    status = wfc.collapse(grid.select_next())

    if status is Status.CANCELLED:
        raise GenerationCancelled(f"generation cancelled after {wfc.stats.attempts} attempts", stats=wfc.stats)
    if status is Status.UNSOLVABLE:
        raise UnsolvableError(f"no {height}x{width} grid satisfies the learned rules from this start", stats=wfc.stats)

    return GenerationResult(grid=grid.to_array(), rules=rule_table.to_rules(), stats=wfc.stats)


def generate_from_config(config: GenerationConfig, cancel: Optional[Callable[[], bool]] = None) -> GenerationResult:
    if config.sample is None:
        raise ConfigError("config does not name a sample")
    return generate(
        config.sample,
        config.height,
        config.width,
        seeds=config.seeds,
        rng=config.rng_seed,
        strict_seeds=config.strict_seeds,
        cancel=cancel,
        time_limit=config.time_limit,
    )
