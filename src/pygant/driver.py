"""The driver: loads a build script and achieves targets."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Optional

from rich.console import Console

from pygant.binding import Binding
from pygant.builder import TaskBuilder
from pygant.console_logger import ConsoleLogger
from pygant.engine import TaskEngine
from pygant.errors import SUCCESS, TARGET_ERROR, GantException, ScriptError, UnknownTarget
from pygant.logging import Logger
from pygant.resolver import BuildContext, TargetResolver
from pygant.script import evaluate_script, names_existing_file, read_script
from pygant.state import RunState, Verbosity, run_state
from pygant.target import TargetRegistry

DEFAULT_TARGET = "default"


class Gant:
    """Runs targets from a build script.

    A driver owns its binding, its task builder and the set of target bodies
    executed so far. Creating one resets the process-wide run state to its
    defaults.
    """

    def __init__(
        self,
        binding: Optional[Binding] = None,
        logger: Optional[Logger] = None,
        engine: Optional[TaskEngine] = None,
        state: Optional[RunState] = None,
    ) -> None:
        """Initialize the driver.

        Args:
            binding: Prepared binding; a task builder is added if it has none
            logger: Output channel (default: a ConsoleLogger on stdout)
            engine: Task engine for the task builder (default: rooted at cwd)
            state: Run state (default: the process-wide one)
        """
        self.state = state if state is not None else run_state
        self.state.reset()

        self.logger = logger if logger is not None else ConsoleLogger(Console(), state=self.state)
        self.binding = binding if binding is not None else Binding()
        if "ant" not in self.binding:
            if engine is None:
                engine = TaskEngine(logger=self.logger)
            self.binding.set_builder(TaskBuilder(engine, self.logger, self.state))

        self.registry = TargetRegistry(self.binding, self.logger)
        self.resolver = TargetResolver(self.binding, self.registry, self.logger)
        self.context = BuildContext(self.resolver)
        self.build_class_name = "build_gant"

        self.binding.set("target", self.registry.target_function())
        self.binding.set("depends", self.context.depends)
        self.binding.set("build", self.context)

    @property
    def builder(self) -> TaskBuilder:
        return self.binding.builder

    @property
    def executed(self) -> set:
        return self.resolver.executed

    def set_build_class_name(self, name: str) -> None:
        """Set the label used for the script in diagnostics."""
        self.build_class_name = name

    def define(self, name: str, value: Any) -> None:
        """Make a definition visible to the script and as a task engine property."""
        self.binding.set(name, value)
        engine = getattr(self.builder, "engine", None)
        if engine is not None:
            engine.set_property(name, value)

    def load_script(self, source: str | Path) -> Gant:
        """Evaluate a build script, registering its targets.

        Args:
            source: Script text, or a path (Path or str) to a script file

        Returns:
            self

        Raises:
            ScriptError: If the script cannot be read, compiled or evaluated
        """
        if isinstance(source, Path) or names_existing_file(source):
            path = Path(source)
            text = read_script(path)
            filename = str(path)
        else:
            text = source
            filename = self.build_class_name

        self.logger.debug(f"Loading build script {filename}", markup=False)
        evaluate_script(text, self.binding.namespace, filename)
        return self

    def target_descriptions(self) -> list[tuple[str, str]]:
        """(name, description) of every registered target, sorted by name."""
        return self.registry.descriptions()

    def process_targets(self, targets: Optional[str | Iterable[str]] = None) -> int:
        """Achieve targets in order, stopping at the first failure.

        Args:
            targets: A target name, a list of names, or None for "default"

        Returns:
            0 on success, otherwise the exit code of the failure
        """
        if targets is None:
            names = [DEFAULT_TARGET]
        elif isinstance(targets, str):
            names = [targets]
        else:
            names = list(targets) or [DEFAULT_TARGET]

        for name in names:
            return_code = self._achieve(name)
            if return_code != SUCCESS:
                return return_code
        return SUCCESS

    def reset_executed(self) -> None:
        """Forget which targets ran, starting a new run."""
        self.resolver.executed.clear()

    def _achieve(self, name: str) -> int:
        try:
            if name not in self.registry:
                raise UnknownTarget(name)
            body = self.binding.get(name)
            if not callable(body):
                raise UnknownTarget(name)
            self.resolver.run_once(body)
        except GantException as e:
            self._report(name, str(e))
            return e.exit_code
        except Exception as e:
            self._report(name, f"{type(e).__name__}: {e}")
            return TARGET_ERROR
        return SUCCESS

    def _report(self, name: str, message: str) -> None:
        self.logger.line(Verbosity.ERRORS_ONLY, message)
        self.logger.debug(f"Target '{name}' failed in {self.build_class_name}", markup=False)
