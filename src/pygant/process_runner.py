"""Process execution abstraction layer.

This module provides an interface for running subprocesses, allowing for
better testability and dependency injection. The ``exec`` task runs its
commands through a ProcessRunner.
"""

import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

__all__ = [
    "ProcessRunner",
    "PassthroughProcessRunner",
    "SilentProcessRunner",
    "TaskOutputTypes",
    "make_process_runner",
]


class TaskOutputTypes(Enum):
    """Output control modes for the ``exec`` task's ``output`` attribute."""

    ALL = "all"
    NONE = "none"


class ProcessRunner(ABC):
    """Abstract interface for running subprocess commands."""

    @abstractmethod
    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        """
        Run a subprocess command.

        This method signature matches subprocess.run() to allow for direct
        substitution in existing code.

        Args:
        *args: Positional arguments passed to subprocess.run
        **kwargs: Keyword arguments passed to subprocess.run

        Returns:
        subprocess.CompletedProcess: The completed process result
        """
        ...


class PassthroughProcessRunner(ProcessRunner):
    """Process runner that directly delegates to subprocess.run."""

    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        return subprocess.run(*args, **kwargs)


class SilentProcessRunner(ProcessRunner):
    """Process runner that suppresses all subprocess output by redirecting to DEVNULL."""

    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        """
        Run a subprocess command with stdout and stderr suppressed.

        This implementation forces stdout=DEVNULL and stderr=DEVNULL to discard
        all subprocess output, regardless of what the caller requests.
        """
        kwargs.pop("capture_output", None)
        kwargs["stdout"] = subprocess.DEVNULL
        kwargs["stderr"] = subprocess.DEVNULL
        return subprocess.run(*args, **kwargs)


def make_process_runner(output_type: TaskOutputTypes) -> ProcessRunner:
    """
    Factory function for creating ProcessRunner instances.

    Args:
    output_type: The type of output control to use

    Returns:
    ProcessRunner: A new ProcessRunner instance

    Raises:
    ValueError: If an invalid TaskOutputTypes value is provided
    """
    match output_type:
        case TaskOutputTypes.ALL:
            return PassthroughProcessRunner()
        case TaskOutputTypes.NONE:
            return SilentProcessRunner()
        case _:
            raise ValueError(f"Invalid TaskOutputTypes: {output_type}")
