from __future__ import annotations

from typing import Any, Optional

from rich.console import Console

from pygant.logging import Logger
from pygant.state import RunState, Verbosity, run_state


class ConsoleLogger(Logger):
    """Console-based logger implementation using Rich for formatting.

    Filters log messages based on the current verbosity. Messages whose
    priority is higher than the current level are suppressed. Unless an
    explicit level is given, the base level follows the process-wide
    RunState, so changing the verbosity there is seen immediately. Supports a
    stack-based level management system for temporary verbosity changes.
    """

    def __init__(
        self,
        console: Console,
        level: Optional[Verbosity] = None,
        state: Optional[RunState] = None,
    ) -> None:
        """Initialize the console logger.

        Args:
            console: Rich Console instance to use for output
            level: Fixed base level; None to follow the run state's verbosity
            state: Run state to follow (default: the process-wide one)
        """
        self._console = console
        self._base = level
        self._state = state if state is not None else run_state
        self._levels: list[Verbosity] = []

    @property
    def console(self) -> Console:
        return self._console

    @property
    def level(self) -> Verbosity:
        if self._levels:
            return self._levels[-1]
        if self._base is not None:
            return self._base
        return self._state.verbosity

    def enabled(self, level: Verbosity) -> bool:
        current = self.level
        return current is not Verbosity.SILENT and level.value <= current.value

    def log(self, level: Verbosity = Verbosity.NORMAL, *args: Any, **kwargs: Any) -> None:
        """Log a message to the console if it meets the current level threshold.

        Args:
            level: The priority of this message (default: NORMAL)
            *args: Positional arguments passed to Rich Console.print()
            **kwargs: Keyword arguments passed to Rich Console.print()
        """
        if self.enabled(level):
            self._console.print(*args, **kwargs)

    def line(self, level: Verbosity, text: str) -> None:
        """Write text exactly as given (no markup, highlighting or wrapping)."""
        if self.enabled(level):
            self._console.out(text, highlight=False)

    def push_level(self, level: Verbosity) -> None:
        """Push a new verbosity onto the stack.

        Args:
            level: The new level to activate
        """
        self._levels.append(level)

    def pop_level(self) -> Verbosity:
        """Pop the current level and return to the previous one.

        Returns:
            The level that was popped

        Raises:
            RuntimeError: If there is no pushed level to pop
        """
        if not self._levels:
            raise RuntimeError("Cannot pop the base log level")
        return self._levels.pop()
