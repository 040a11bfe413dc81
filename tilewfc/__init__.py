from .directions import Direction
from .errors import (
    ConfigError,
    GenerationCancelled,
    InvalidSeedError,
    SampleIOError,
    SampleParseError,
    TileWFCError,
    UnsolvableError,
)
from .generate import GenerationResult, generate, generate_from_config
from .grid import Cell, Grid, Neighbor
from .propagator import Propagator
from .rules import Rule, RuleTable, learn_rules, load_sample, parse_sample
from .sampler import weighted_order
from .wfc import WFC, SolveStats, Status

__version__ = "0.1.0"
