"""The task builder proxy bound as ``ant`` in build scripts.

Every task call made by a build script goes through TaskBuilder.invoke(). In a
real run the call is forwarded to the task engine; in a dry run a trace line is
written instead and nothing reaches the engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Optional, Sequence

from pygant.errors import TaskNotFound, UnexpectedArgument
from pygant.logging import Logger
from pygant.state import RunState, Verbosity, run_state

__all__ = [
    "TaskBuilder",
    "TaskInvocation",
    "format_trace_header",
    "format_trace_line",
    "pack_arguments",
    "parse_arguments",
]

TRACE_FIELD_WIDTH = 9


class TaskInvocation:
    """A task name with its attribute map and optional nested body."""

    __slots__ = ("name", "attributes", "body")

    def __init__(self, name: str, attributes: Optional[Mapping[str, Any]], body: Optional[Callable[[], Any]]) -> None:
        self.name = name
        self.attributes = attributes
        self.body = body

    def __repr__(self) -> str:
        return f"TaskInvocation({self.name!r}, {self.attributes!r}, body={self.body!r})"


def parse_arguments(name: str, arguments: Sequence[Any]) -> TaskInvocation:
    """Split the raw argument list of a task call.

    Item 0 is either an attribute map or a nested body. If it is a map, item 1
    (if present) must be a nested body. No arguments at all means an empty
    attribute map.

    Raises:
        UnexpectedArgument: If the arguments do not have that shape
    """
    if len(arguments) == 0:
        return TaskInvocation(name, {}, None)
    if len(arguments) > 2:
        raise UnexpectedArgument(name, arguments[2])

    first = arguments[0]
    if isinstance(first, Mapping):
        body = None
        if len(arguments) == 2:
            body = arguments[1]
            if not callable(body):
                raise UnexpectedArgument(name, body)
        return TaskInvocation(name, first, body)
    if callable(first):
        if len(arguments) == 2:
            raise UnexpectedArgument(name, arguments[1])
        return TaskInvocation(name, None, first)
    raise UnexpectedArgument(name, first)


def pack_arguments(args: Sequence[Any], kwargs: Optional[Mapping[str, Any]] = None) -> list[Any]:
    """Turn a Python call into a task argument list.

    Keyword arguments become the attribute map (in call order) and go first,
    followed by the positional arguments.
    """
    arguments: list[Any] = []
    if kwargs:
        arguments.append(dict(kwargs))
    arguments.extend(args)
    return arguments


def format_trace_header(name: str) -> str:
    """Bracketed task name, right-justified, followed by a single space."""
    return f"[{name}".rjust(TRACE_FIELD_WIDTH) + "] "


def format_trace_line(name: str, attributes: Optional[Mapping[str, Any]]) -> str:
    """Format the dry-run trace for a task call (without the trailing newline).

    Example:
        >>> format_trace_line("copy", {"file": "x", "todir": "y"})
        "    [copy] file : 'x' , todir : 'y'"
    """
    header = format_trace_header(name)
    if not attributes:
        return header
    return header + " , ".join(f"{key} : '{value}'" for key, value in attributes.items())


class TaskBuilder:
    """Proxy forwarding task calls to the task engine.

    ``ant.copy(file="x", todir="y")`` is the same as
    ``ant.invoke("copy", [{"file": "x", "todir": "y"}])``.
    """

    def __init__(self, engine: Any, logger: Logger, state: Optional[RunState] = None) -> None:
        """
        Args:
            engine: Task engine that executes real task calls
            logger: Channel for dry-run traces
            state: Run state to consult (default: the process-wide one)
        """
        self._engine = engine
        self._logger = logger
        self._state = state if state is not None else run_state

    @property
    def engine(self) -> Any:
        return self._engine

    @property
    def logger(self) -> Logger:
        return self._logger

    def invoke(self, name: str, arguments: Sequence[Any]) -> Any:
        """Invoke the task `name`.

        Args:
            name: Task name
            arguments: One or two items: an attribute map and/or a nested body

        Returns:
            The engine's result in a real run, None in a dry run

        Raises:
            TaskNotFound: In a real run, if the engine has no such task
            UnexpectedArgument: If the arguments are malformed
        """
        if not self._state.dry_run:
            # Unknown names fail on the name, whatever the arguments look like
            if not self._engine.has_task(name):
                raise TaskNotFound(name)
            invocation = parse_arguments(name, arguments)
            self._logger.debug(f"Executing task {name}")
            return self._engine.execute(invocation.name, invocation.attributes or {}, invocation.body)

        invocation = parse_arguments(name, arguments)
        if self._state.verbosity is Verbosity.SILENT:
            return None

        self._logger.line(Verbosity.ERRORS_ONLY, format_trace_line(name, invocation.attributes))
        if invocation.body is not None:
            invocation.body()
        return None

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)

        def task(*args: Any, **kwargs: Any) -> Any:
            return self.invoke(name, pack_arguments(args, kwargs))

        task.__name__ = name
        return task

    def __repr__(self) -> str:
        return f"TaskBuilder(engine={self._engine!r})"
