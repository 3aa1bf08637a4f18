"""Built-in tasks available through the task builder."""

from __future__ import annotations

import os
import shlex
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional

from pygant.errors import TaskFailure
from pygant.process_runner import TaskOutputTypes
from pygant.state import Verbosity

if TYPE_CHECKING:
    from pygant.engine import TaskEngine, TaskFn

Body = Optional[Callable[[], Any]]

BUILTIN_TASKS: dict[str, "TaskFn"] = {}
# Tasks that run their nested body themselves; the engine runs it after the others
CONTAINER_TASKS: set[str] = set()

_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0"}


def task(name: str, container: bool = False):
    """Register a function as a built-in task."""
    def register(fn):
        BUILTIN_TASKS[name] = fn
        if container:
            CONTAINER_TASKS.add(name)
        return fn

    return register


def _flag(name: str, attributes: dict[str, Any], key: str, default: bool) -> bool:
    value = attributes.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise TaskFailure(name, f"Attribute '{key}' must be a boolean, got '{value}'")


def _required(name: str, attributes: dict[str, Any], key: str) -> Any:
    value = attributes.get(key)
    if value is None or value == "":
        raise TaskFailure(name, f"Attribute '{key}' is required")
    return value


def _destination(engine: TaskEngine, name: str, source: Path, attributes: dict[str, Any]) -> Path:
    if attributes.get("tofile"):
        return engine.resolve_path(attributes["tofile"])
    if attributes.get("todir"):
        return engine.resolve_path(attributes["todir"]) / source.name
    raise TaskFailure(name, "One of 'tofile' or 'todir' is required")


@task("echo")
def echo(engine: TaskEngine, attributes: dict[str, Any], body: Body) -> None:
    engine.log("echo", str(attributes.get("message", "")), Verbosity.WARNINGS_AND_ERRORS)


@task("property")
def property_(engine: TaskEngine, attributes: dict[str, Any], body: Body) -> None:
    """Define a property, or import the environment under a prefix.

    ``property(name="x", value="1")`` or ``property(environment="env")`` which
    defines ``env.PATH`` and so on.
    """
    if "environment" in attributes:
        prefix = str(attributes["environment"]).rstrip(".")
        for key, value in os.environ.items():
            engine.set_property(f"{prefix}.{key}", value)
        return
    name = _required("property", attributes, "name")
    if "location" in attributes:
        value = str(engine.resolve_path(attributes["location"]))
    else:
        value = attributes.get("value", "")
    if not engine.set_property(str(name), value):
        engine.log("property", f"Override ignored for property \"{name}\"", Verbosity.VERBOSE)


@task("mkdir")
def mkdir(engine: TaskEngine, attributes: dict[str, Any], body: Body) -> None:
    directory = engine.resolve_path(_required("mkdir", attributes, "dir"))
    if directory.is_dir():
        return
    directory.mkdir(parents=True, exist_ok=True)
    engine.log("mkdir", f"Created dir: {directory}")


@task("copy")
def copy(engine: TaskEngine, attributes: dict[str, Any], body: Body) -> None:
    source = engine.resolve_path(_required("copy", attributes, "file"))
    if not source.is_file():
        raise TaskFailure("copy", f"Warning: Could not find file {source} to copy.")
    destination = _destination(engine, "copy", source, attributes)
    overwrite = _flag("copy", attributes, "overwrite", False)
    if destination.exists() and not overwrite and destination.stat().st_mtime >= source.stat().st_mtime:
        engine.log("copy", f"Skipping {source} (destination is up to date)", Verbosity.VERBOSE)
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)
    engine.log("copy", f"Copying 1 file to {destination.parent}")


@task("move")
def move(engine: TaskEngine, attributes: dict[str, Any], body: Body) -> None:
    source = engine.resolve_path(_required("move", attributes, "file"))
    if not source.exists():
        raise TaskFailure("move", f"Warning: Could not find file {source} to move.")
    destination = _destination(engine, "move", source, attributes)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source), str(destination))
    engine.log("move", f"Moving 1 file to {destination.parent}")


@task("delete")
def delete(engine: TaskEngine, attributes: dict[str, Any], body: Body) -> None:
    quiet = _flag("delete", attributes, "quiet", False)
    fail_on_error = _flag("delete", attributes, "failonerror", True)
    if attributes.get("dir"):
        directory = engine.resolve_path(attributes["dir"])
        if directory.is_dir():
            shutil.rmtree(directory)
            if not quiet:
                engine.log("delete", f"Deleting directory {directory}")
        return
    target = engine.resolve_path(_required("delete", attributes, "file"))
    if target.is_file():
        target.unlink()
        if not quiet:
            engine.log("delete", f"Deleting: {target}")
    elif target.exists() and fail_on_error:
        raise TaskFailure("delete", f"{target} is not a file")


@task("touch")
def touch(engine: TaskEngine, attributes: dict[str, Any], body: Body) -> None:
    target = engine.resolve_path(_required("touch", attributes, "file"))
    if not target.exists():
        engine.log("touch", f"Creating {target}")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.touch()


@task("available")
def available(engine: TaskEngine, attributes: dict[str, Any], body: Body) -> bool:
    """Set ``property`` when ``file`` exists. Returns whether it exists."""
    name = _required("available", attributes, "property")
    exists = engine.resolve_path(_required("available", attributes, "file")).exists()
    if exists:
        engine.set_property(str(name), attributes.get("value", "true"))
    return exists


@task("exec")
def exec_(engine: TaskEngine, attributes: dict[str, Any], body: Body) -> int:
    """Run an external program.

    Attributes: ``executable`` (required), ``args`` (string, split shell-style,
    or a list), ``dir``, ``failonerror`` (default true), ``output`` ("all" or
    "none"), ``resultproperty``.
    """
    executable = str(_required("exec", attributes, "executable"))
    args = attributes.get("args", [])
    if isinstance(args, str):
        args = shlex.split(args)
    command = [executable] + [str(arg) for arg in args]
    cwd = engine.resolve_path(attributes["dir"]) if attributes.get("dir") else engine.base_dir
    fail_on_error = _flag("exec", attributes, "failonerror", True)
    try:
        output = TaskOutputTypes(str(attributes.get("output", "all")))
    except ValueError:
        raise TaskFailure("exec", f"Invalid output mode '{attributes.get('output')}'")

    engine.log("exec", f"Executing '{' '.join(command)}'", Verbosity.VERBOSE)
    runner = engine.process_runner_factory(output)
    try:
        result = runner.run(command, cwd=cwd, check=False)
    except FileNotFoundError:
        raise TaskFailure("exec", f"Execute failed: cannot run program \"{executable}\"")

    if attributes.get("resultproperty"):
        engine.set_property(str(attributes["resultproperty"]), result.returncode)
    if result.returncode != 0 and fail_on_error:
        raise TaskFailure("exec", f"exec returned: {result.returncode}")
    return result.returncode


@task("fail")
def fail(engine: TaskEngine, attributes: dict[str, Any], body: Body) -> None:
    raise TaskFailure("fail", str(attributes.get("message", "No message")))


@task("sequential", container=True)
def sequential(engine: TaskEngine, attributes: dict[str, Any], body: Body) -> Any:
    """Container task: runs its nested body."""
    if body is None:
        return None
    return body()
