"""pygant - a Python build tool driven by scripted targets."""

__version__ = "0.1.0"

from pygant.binding import Binding
from pygant.builder import TaskBuilder, format_trace_line
from pygant.driver import DEFAULT_TARGET, Gant
from pygant.engine import TaskEngine
from pygant.errors import (
    BuildFailure,
    GantException,
    MissingMethod,
    MissingVariable,
    ScriptError,
    TaskFailure,
    TaskNotFound,
    UnexpectedArgument,
    UnknownDependency,
    UnknownTarget,
)
from pygant.host import GantTask, SimpleHostProject
from pygant.resolver import BuildContext, TargetResolver
from pygant.state import RunState, Verbosity, run_state
from pygant.target import Target, TargetRegistry

__all__ = [
    "__version__",
    "Binding",
    "TaskBuilder",
    "format_trace_line",
    "DEFAULT_TARGET",
    "Gant",
    "TaskEngine",
    "BuildFailure",
    "GantException",
    "MissingMethod",
    "MissingVariable",
    "ScriptError",
    "TaskFailure",
    "TaskNotFound",
    "UnexpectedArgument",
    "UnknownDependency",
    "UnknownTarget",
    "GantTask",
    "SimpleHostProject",
    "BuildContext",
    "TargetResolver",
    "RunState",
    "Verbosity",
    "run_state",
    "Target",
    "TargetRegistry",
]
