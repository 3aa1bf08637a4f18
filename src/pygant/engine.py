"""The task engine: executes named tasks on behalf of the task builder."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from pygant.builder import format_trace_header
from pygant.errors import GantException, TaskFailure, TaskNotFound
from pygant.logging import Logger
from pygant.process_runner import ProcessRunner, TaskOutputTypes, make_process_runner
from pygant.state import Verbosity
from pygant.substitution import substitute_attributes, substitute_properties
from pygant.tasks import BUILTIN_TASKS, CONTAINER_TASKS

# A task implementation receives the engine, the expanded attribute map and
# the optional nested body.
TaskFn = Callable[["TaskEngine", dict[str, Any], Optional[Callable[[], Any]]], Any]


class TaskEngine:
    """Executes tasks by name relative to a base directory.

    Holds the build's properties. As in Ant, properties are immutable: the
    first definition of a name wins and later ones are ignored.
    """

    def __init__(
        self,
        base_dir: Optional[Path | str] = None,
        logger: Optional[Logger] = None,
        process_runner_factory: Callable[[TaskOutputTypes], ProcessRunner] = make_process_runner,
    ) -> None:
        """Initialize the engine.

        Args:
            base_dir: Directory relative paths are resolved against (default: cwd)
            logger: Channel for task output; None discards it
            process_runner_factory: Creates the runner used by the exec task
        """
        self.base_dir = Path(base_dir if base_dir is not None else os.getcwd()).resolve()
        self.logger = logger
        self.process_runner_factory = process_runner_factory
        self.properties: dict[str, str] = {"basedir": str(self.base_dir)}
        self._tasks: dict[str, TaskFn] = dict(BUILTIN_TASKS)
        self._containers: set[str] = set(CONTAINER_TASKS)

    def register_task(self, name: str, fn: TaskFn, container: bool = False) -> None:
        """Add or replace a task. A container task is handed the nested body to run."""
        self._tasks[name] = fn
        if container:
            self._containers.add(name)
        else:
            self._containers.discard(name)

    def has_task(self, name: str) -> bool:
        return name in self._tasks

    def task_names(self) -> list[str]:
        return sorted(self._tasks)

    def set_property(self, name: str, value: Any) -> bool:
        """Define a property unless it already exists.

        Returns:
            True if the property was set, False if it was already defined
        """
        if name in self.properties:
            return False
        self.properties[name] = "" if value is None else str(value)
        return True

    def get_property(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.properties.get(name, default)

    def expand(self, text: str) -> str:
        return substitute_properties(text, self.properties)

    def resolve_path(self, path: str | Path) -> Path:
        """Resolve a task path attribute against the base directory."""
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self.base_dir / candidate
        return candidate

    def log(self, task_name: str, message: str, level: Verbosity = Verbosity.NORMAL) -> None:
        """Write a task output line in the ``    [name] message`` format."""
        if self.logger is not None:
            self.logger.line(level, format_trace_header(task_name) + message)

    def execute(self, name: str, attributes: Mapping[str, Any], body: Optional[Callable[[], Any]] = None) -> Any:
        """Run a task.

        Args:
            name: Task name
            attributes: Task attributes; string values get ${property} expansion
            body: Optional nested body. Container tasks receive it; for any other
                task it runs after the task, as it does in a dry run

        Returns:
            Whatever the task returns

        Raises:
            TaskNotFound: If no task of that name exists
            TaskFailure: If the task fails
        """
        fn = self._tasks.get(name)
        if fn is None:
            raise TaskNotFound(name)

        container = name in self._containers
        expanded = substitute_attributes(attributes, self.properties)
        try:
            result = fn(self, expanded, body if container else None)
        except GantException:
            raise
        except (OSError, ValueError) as e:
            raise TaskFailure(name, str(e)) from e

        if body is not None and not container:
            body()
        return result

    def __repr__(self) -> str:
        return f"TaskEngine(base_dir={str(self.base_dir)!r})"
