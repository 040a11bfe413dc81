from typing import Optional


class TileWFCError(Exception):
    """Base class for all errors raised by tilewfc"""


class SampleIOError(TileWFCError, OSError):
    """The sample grid could not be read"""


class SampleParseError(TileWFCError, ValueError):
    """The sample grid contains something that is not a tile type"""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        if line is not None:
            location = f"line {line}" if column is None else f"line {line}, column {column}"
            message = f"{message} ({location})"
        super().__init__(message)
        self.line = line
        self.column = column


class InvalidSeedError(TileWFCError, ValueError):
    """A seed references an unknown tile type or a cell outside the grid"""


class ConfigError(TileWFCError, ValueError):
    """A generation config file is malformed"""


class UnsolvableError(TileWFCError):
    """No fully collapsed grid exists from the initial (seeded) configuration"""

    def __init__(self, message: str, stats=None) -> None:
        super().__init__(message)
        self.stats = stats


class GenerationCancelled(TileWFCError):
    """Generation was stopped by a cancel request or time limit"""

    def __init__(self, message: str, stats=None) -> None:
        super().__init__(message)
        self.stats = stats
