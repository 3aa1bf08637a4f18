"""Locating and evaluating build scripts."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pygant.errors import ScriptError

DEFAULT_BUILD_FILE = "build.gant"


def find_build_file(start_dir: Path | None = None, filename: str = DEFAULT_BUILD_FILE) -> Path | None:
    """Find the build file in the current or parent directories.

    Args:
        start_dir: Directory to start searching from (defaults to cwd)
        filename: Build file name to look for

    Returns:
        Path to the build file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    # Search up the directory tree
    while True:
        candidate = current / filename
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:
            # Reached root
            break
        current = parent

    return None


def names_existing_file(source: str) -> bool:
    """True if a script source string is really a path to an existing file."""
    if "\n" in source:
        return False
    try:
        return Path(source).is_file()
    except (OSError, ValueError):
        # Name too long, embedded NUL and similar: not a path
        return False


def read_script(path: Path) -> str:
    """Read a build script.

    Raises:
        ScriptError: If the file cannot be read
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ScriptError(f"Cannot read Gantfile {path}: {e}") from e


def evaluate_script(source: str, namespace: dict[str, Any], filename: str) -> None:
    """Compile and run a build script in `namespace`.

    Args:
        source: Python source of the script
        namespace: Globals for the script (the binding's namespace)
        filename: Name reported in tracebacks and error messages

    Raises:
        ScriptError: If the script does not compile or raises while running
    """
    try:
        code = compile(source, filename, "exec")
    except SyntaxError as e:
        raise ScriptError(f"Error evaluating Gantfile: startup failed, {filename}: {e.lineno}: {e.msg}") from e

    namespace.setdefault("__name__", "__gant__")
    namespace["__file__"] = filename
    try:
        exec(code, namespace)
    except Exception as e:
        raise ScriptError(f"Error evaluating Gantfile: {filename}: {type(e).__name__}: {e}") from e
