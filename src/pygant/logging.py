"""Logging infrastructure for pygant.

Provides the verbosity-filtered Logger interface that every part of the build
writes through, so that host integrations can capture or silence output.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pygant.state import Verbosity


class Logger(ABC):
    """Verbosity-filtered output channel.

    Messages carry a priority (a Verbosity member); a message is emitted only
    when its priority is <= the logger's current level.
    """

    @abstractmethod
    def log(self, level: Verbosity = Verbosity.NORMAL, *args: Any, **kwargs: Any) -> None:
        """Log a message at the given priority."""
        ...

    @abstractmethod
    def line(self, level: Verbosity, text: str) -> None:
        """Write text verbatim, without markup or wrapping, followed by a newline."""
        ...

    @abstractmethod
    def push_level(self, level: Verbosity) -> None:
        """Temporarily switch to a new level."""
        ...

    @abstractmethod
    def pop_level(self) -> Verbosity:
        """Return to the level active before the last push_level()."""
        ...

    def error(self, *args: Any, **kwargs: Any) -> None:
        self.log(Verbosity.ERRORS_ONLY, *args, **kwargs)

    def warn(self, *args: Any, **kwargs: Any) -> None:
        self.log(Verbosity.WARNINGS_AND_ERRORS, *args, **kwargs)

    def info(self, *args: Any, **kwargs: Any) -> None:
        self.log(Verbosity.NORMAL, *args, **kwargs)

    def verbose(self, *args: Any, **kwargs: Any) -> None:
        self.log(Verbosity.VERBOSE, *args, **kwargs)

    def debug(self, *args: Any, **kwargs: Any) -> None:
        self.log(Verbosity.DEBUG, *args, **kwargs)
