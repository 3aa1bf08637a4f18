"""Adapter letting another build tool run a pygant build.

The host supplies a project object with a ``base_dir``; the adapter runs the
build script found there and raises BuildFailure if the build fails.
"""

from __future__ import annotations

import io
from contextlib import contextmanager, redirect_stdout
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional, Protocol

from rich.console import Console

from pygant.binding import Binding
from pygant.builder import TaskBuilder
from pygant.console_logger import ConsoleLogger
from pygant.driver import Gant
from pygant.engine import TaskEngine
from pygant.errors import BuildFailure, ScriptError
from pygant.logging import Logger
from pygant.script import DEFAULT_BUILD_FILE
from pygant.state import Verbosity, run_state


class HostProject(Protocol):
    base_dir: Path


@dataclass
class SimpleHostProject:
    """Minimal host project: just a base directory."""

    base_dir: Path = field(default_factory=Path.cwd)


@dataclass
class Definition:
    """A name/value pair declared as a property before the build runs."""

    name: str
    value: Optional[str] = None


@contextmanager
def suppressed_output(logger: Logger) -> Iterator[None]:
    """Silence stdout and the logger; both are restored on every exit path."""
    logger.push_level(Verbosity.SILENT)
    try:
        with redirect_stdout(io.StringIO()):
            yield
    finally:
        logger.pop_level()


class GantTask:
    """Execute a pygant build script on behalf of a host build tool.

    Attributes:
        file: Script path relative to the host project's base directory
        target: Single target to achieve ("" for the default target)
    """

    def __init__(self, project: HostProject, logger: Optional[Logger] = None) -> None:
        self.project = project
        self.logger = logger
        self.file = DEFAULT_BUILD_FILE
        self.target = ""
        self.targets: list[str] = []
        self.definitions: list[Definition] = []

    def set_file(self, file: str) -> None:
        self.file = file

    def set_target(self, target: str) -> None:
        self.target = target

    def add_target(self, value: str) -> None:
        """Add a target to achieve (nested ``gantTarget`` element)."""
        self.targets.append(value)

    def add_definition(self, name: str, value: Optional[str] = None) -> Definition:
        """Add a property definition (nested ``definition`` element)."""
        definition = Definition(name=name, value=value)
        self.definitions.append(definition)
        return definition

    def target_list(self) -> list[str]:
        names = [self.target] if self.target else []
        names.extend(self.targets)
        return names

    def execute(self) -> None:
        """Load the script and achieve the targets.

        Raises:
            BuildFailure: If the script is missing or the build returns non-zero
        """
        base_dir = Path(self.project.base_dir)
        script_path = base_dir / self.file
        if not script_path.is_file():
            raise BuildFailure("Gantfile does not exist.")

        run_state.reset()
        logger = self.logger if self.logger is not None else ConsoleLogger(Console())
        engine = TaskEngine(base_dir=base_dir, logger=logger)
        ant = TaskBuilder(engine, logger)

        with suppressed_output(logger):
            ant.property(environment="environment")
            for definition in self.definitions:
                ant.property(name=definition.name, value=definition.value)

        binding = Binding(ant)
        gant = Gant(binding=binding, logger=logger)
        try:
            gant.load_script(script_path)
        except ScriptError as e:
            logger.line(Verbosity.ERRORS_ONLY, str(e))
            return_code = e.exit_code
        else:
            return_code = gant.process_targets(self.target_list() or None)

        if return_code != 0:
            raise BuildFailure(f"Gant execution failed with return code {return_code}.")


def run_gant(project: Any, file: str = DEFAULT_BUILD_FILE, targets: Optional[list[str]] = None,
             definitions: Optional[dict[str, str]] = None, logger: Optional[Logger] = None) -> None:
    """Convenience wrapper around GantTask for hosts that prefer a function call."""
    task = GantTask(project, logger=logger)
    task.set_file(file)
    for name in targets or []:
        task.add_target(name)
    for name, value in (definitions or {}).items():
        task.add_definition(name, value)
    task.execute()
