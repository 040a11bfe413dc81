import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from .config import GenerationConfig
from .errors import (
    ConfigError,
    GenerationCancelled,
    InvalidSeedError,
    SampleIOError,
    SampleParseError,
    UnsolvableError,
)
from .generate import generate_from_config
from .logging_config import setup_logging
from .rules import format_rules


def format_grid(grid: np.ndarray, hex_output: bool = False) -> str:
    """Rows of tile types separated by spaces, optionally as two-digit hex"""
    fmt = "{:02X}" if hex_output else "{}"
    return "\n".join(" ".join(fmt.format(int(v)) for v in row) for row in grid)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tilewfc",
        description="Generate a tile map from a sample grid with wave function collapse.",
    )
    parser.add_argument(
        "sample",
        nargs="?",
        default=None,
        help="Sample grid file: one row per line, tile types separated by spaces.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML generation config; command line options override it.",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Rows in the generated grid.",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Columns in the generated grid.",
    )
    parser.add_argument(
        "--seed-tile",
        nargs=3,
        type=int,
        action="append",
        metavar=("TILE", "ROW", "COL"),
        help="Place TILE at (ROW, COL) before solving. Can be repeated.",
    )
    parser.add_argument(
        "--rng-seed",
        type=int,
        default=None,
        help="Random seed, for reproducible output.",
    )
    parser.add_argument(
        "--strict-seeds",
        action="store_true",
        help="Fail on seeds outside the grid instead of ignoring them.",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Give up after this many seconds.",
    )
    parser.add_argument(
        "--hex",
        action="store_true",
        help="Print tile types as two-digit hex.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the grid to this file in sample format instead of printing it.",
    )
    parser.add_argument(
        "--show-rules",
        action="store_true",
        help="Print the learned rules before the grid.",
    )
    parser.add_argument(
        "--save-config",
        type=str,
        default=None,
        help="Write the effective config to this YAML file.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write debug logs to this file.",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> GenerationConfig:
    config = GenerationConfig.from_yaml(args.config) if args.config else GenerationConfig()

    if args.sample is not None:
        config.sample = args.sample
    for key in ("height", "width"):
        value = getattr(args, key)
        if value is not None:
            if value <= 0:
                raise ConfigError(f"{key} must be positive, got {value}")
            setattr(config, key, value)
    if args.rng_seed is not None:
        config.rng_seed = args.rng_seed
    if args.strict_seeds:
        config.strict_seeds = True
    if args.time_limit is not None:
        config.time_limit = args.time_limit
    if args.seed_tile:
        config.seeds = [(tile, (row, col)) for tile, row, col in args.seed_tile]
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console_level = logging.DEBUG if args.debug else logging.WARNING
    try:
        setup_logging(console_level=console_level, log_file=args.log_file)
    except OSError as e:
        print(f"error: could not open log file: {e}", file=sys.stderr)
        return 2

    try:
        config = config_from_args(args)
        if args.save_config:
            try:
                config.dump(args.save_config)
            except OSError as e:
                raise ConfigError(f"could not write config {args.save_config!r}: {e}") from e
        result = generate_from_config(config)
    except (ConfigError, SampleIOError, SampleParseError, InvalidSeedError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except (UnsolvableError, GenerationCancelled) as e:
        print(f"failed: {e}", file=sys.stderr)
        return 1

    if args.show_rules:
        print(format_rules(result.rules))
        print()

    if args.output:
        try:
            with open(args.output, "w") as f:
                f.write(format_grid(result.grid) + "\n")
        except OSError as e:
            print(f"error: could not write grid: {e}", file=sys.stderr)
            return 2
        print(f"Saved {config.height}x{config.width} grid to: {args.output}")
    else:
        print(format_grid(result.grid, hex_output=args.hex))
    return 0


if __name__ == "__main__":
    sys.exit(main())
