"""Exception taxonomy for pygant.

Every exception carries the exit code the driver reports when it aborts a run.
"""

from __future__ import annotations

from typing import Any

SUCCESS = 0
SCRIPT_ERROR = 2
UNKNOWN_TARGET = 11
TARGET_ERROR = 12
TASK_FAILURE = 13


class GantException(Exception):
    """Generic pygant exception."""

    exit_code = TARGET_ERROR


class ScriptError(GantException):
    """Raised when a build script cannot be read, compiled or evaluated."""

    exit_code = SCRIPT_ERROR


class UnknownTarget(GantException):
    """Raised when a target to achieve is not registered."""

    exit_code = UNKNOWN_TARGET

    def __init__(self, name: str) -> None:
        super().__init__(f"Target {name} does not exist.")
        self.name = name


class UnknownDependency(GantException):
    """Raised when depends() is given something that is not a target."""

    def __init__(self, argument: Any) -> None:
        super().__init__(
            f"depends called with an argument ({argument}) that is not a known target or list of targets."
        )
        self.argument = argument


class MissingMethod(GantException):
    """Raised when a name used in a target body is neither a target nor a task."""

    def __init__(self, name: str, arguments: Any = ()) -> None:
        super().__init__(f"No target, function or task named '{name}'.")
        self.name = name
        self.arguments = arguments


class MissingVariable(GantException):
    """Raised when a name is not present in the binding."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No such variable: {name}")
        self.name = name


class UnexpectedArgument(GantException):
    """Raised when a task call receives something other than attributes or a body."""

    def __init__(self, task_name: str, argument: Any = None) -> None:
        super().__init__(f"Unexpected type of parameter to method {task_name}")
        self.task_name = task_name
        self.argument = argument


class TaskNotFound(GantException):
    """Raised by the task engine when no task of the given name exists."""

    MESSAGE_PREFIX = "Problem: failed to create task or type"

    def __init__(self, name: str) -> None:
        super().__init__(f"{self.MESSAGE_PREFIX} {name}")
        self.name = name


class TaskFailure(GantException):
    """Raised when a task ran but failed."""

    exit_code = TASK_FAILURE

    def __init__(self, task_name: str, message: str) -> None:
        super().__init__(f"[{task_name}] {message}")
        self.task_name = task_name


class BuildFailure(GantException):
    """Raised by the host adapter to report a failed build to the host tool."""
