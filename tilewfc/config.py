from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import ConfigError
from .grid import Seed


@dataclass
class GenerationConfig:
    """Everything needed for one generation run, as stored in a YAML file"""
    sample: Optional[str] = None
    height: int = 15
    width: int = 20
    rng_seed: Optional[int] = None
    strict_seeds: bool = False
    time_limit: Optional[float] = None
    seeds: List[Seed] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationConfig":
        if not isinstance(data, dict):
            raise ConfigError("config must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")

        config = cls()
        if data.get("sample") is not None:
            config.sample = str(data["sample"])
        for key in ("height", "width"):
            if key in data:
                setattr(config, key, _positive_int(key, data[key]))
        if data.get("rng_seed") is not None:
            config.rng_seed = _int("rng_seed", data["rng_seed"])
            if config.rng_seed < 0:
                raise ConfigError(f"rng_seed must be non-negative, got {config.rng_seed}")
        if "strict_seeds" in data:
            if not isinstance(data["strict_seeds"], bool):
                raise ConfigError("strict_seeds must be true or false")
            config.strict_seeds = data["strict_seeds"]
        if data.get("time_limit") is not None:
            value = data["time_limit"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigError(f"time_limit must be a positive number, got {value!r}")
            config.time_limit = float(value)
        config.seeds = [_parse_seed(entry) for entry in data.get("seeds") or []]
        return config

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "GenerationConfig":
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"could not read config {str(path)!r}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {str(path)!r}: {e}") from e
        config = cls.from_dict(data or {})

        # Relative sample paths are relative to the config file
        if config.sample is not None and not Path(config.sample).is_absolute():
            config.sample = str(Path(path).parent / config.sample)
        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sample": self.sample,
            "height": self.height,
            "width": self.width,
            "rng_seed": self.rng_seed,
            "strict_seeds": self.strict_seeds,
            "time_limit": self.time_limit,
            "seeds": [{"tile": tile, "row": row, "col": col} for tile, (row, col) in self.seeds],
        }

    def dump(self, path: Union[str, Path]) -> None:
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)


def _int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return value


def _positive_int(key: str, value: Any) -> int:
    value = _int(key, value)
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {value}")
    return value


def _parse_seed(entry: Any) -> Seed:
    """Seeds are written as {tile, row, col} mappings"""
    if not isinstance(entry, dict) or set(entry) != {"tile", "row", "col"}:
        raise ConfigError(f"seed must have exactly tile, row and col: {entry!r}")
    tile = _int("seed tile", entry["tile"])
    if tile < 0:
        raise ConfigError(f"seed tile must be non-negative, got {tile}")
    return tile, (_int("seed row", entry["row"]), _int("seed col", entry["col"]))
