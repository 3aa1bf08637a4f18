"""Process-wide run-mode state: verbosity level and dry-run flag."""

from __future__ import annotations

import enum

__all__ = ["Verbosity", "RunState", "run_state"]


class Verbosity(enum.Enum):
    """Verbosity levels, ordered from least to most output.

    A message of priority p is emitted only when p <= the current verbosity.
    """

    SILENT = 0
    ERRORS_ONLY = 1
    WARNINGS_AND_ERRORS = 2
    NORMAL = 3
    VERBOSE = 4
    DEBUG = 5

    def __lt__(self, other: Verbosity) -> bool:
        if not isinstance(other, Verbosity):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: Verbosity) -> bool:
        if not isinstance(other, Verbosity):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: Verbosity) -> bool:
        if not isinstance(other, Verbosity):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: Verbosity) -> bool:
        if not isinstance(other, Verbosity):
            return NotImplemented
        return self.value >= other.value

    @classmethod
    def parse(cls, name: str) -> Verbosity:
        """Look up a level by name, case-insensitively.

        Accepts the enum member names plus the short aliases used on the
        command line and in config files ("silent", "quiet", "errors",
        "warnings", "normal", "verbose", "debug").

        Raises:
            ValueError: If the name is not a known level
        """
        key = name.strip().upper().replace("-", "_")
        if key in cls.__members__:
            return cls[key]
        alias = _ALIASES.get(key)
        if alias is None:
            valid = ", ".join(m.name.lower() for m in cls)
            raise ValueError(f"Unknown verbosity '{name}' (expected one of: {valid})")
        return alias


_ALIASES = {
    "QUIET": Verbosity.WARNINGS_AND_ERRORS,
    "ERRORS": Verbosity.ERRORS_ONLY,
    "WARNINGS": Verbosity.WARNINGS_AND_ERRORS,
}

DEFAULT_VERBOSITY = Verbosity.NORMAL


class RunState:
    """Verbosity and dry-run knobs shared by the whole process.

    Set before targets are driven and only read while they run. Not
    thread-safe: one driver at a time per process.
    """

    def __init__(self) -> None:
        self.verbosity = DEFAULT_VERBOSITY
        self.dry_run = False

    def set_verbosity(self, verbosity: Verbosity) -> None:
        self.verbosity = verbosity

    def set_dry_run(self, dry_run: bool) -> None:
        self.dry_run = dry_run

    def reset(self) -> None:
        """Restore the defaults (NORMAL verbosity, real execution)."""
        self.verbosity = DEFAULT_VERBOSITY
        self.dry_run = False

    def __repr__(self) -> str:
        return f"RunState(verbosity={self.verbosity.name}, dry_run={self.dry_run})"


run_state = RunState()
