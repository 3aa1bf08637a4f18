"""Command-line interface for pygant."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from pygant import __version__
from pygant.cli_commands.list_targets import list_targets
from pygant.config import ConfigError, GantConfig, load_config
from pygant.console_logger import ConsoleLogger
from pygant.driver import Gant
from pygant.engine import TaskEngine
from pygant.errors import SCRIPT_ERROR, SUCCESS, ScriptError
from pygant.logging import Logger
from pygant.script import DEFAULT_BUILD_FILE, find_build_file
from pygant.state import Verbosity

app = typer.Typer(
    help="pygant - a Python build tool driven by scripted targets",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _result_marker(success: bool) -> str:
    """Tick or cross for the closing build line; ASCII when stdout cannot encode it."""
    symbol = "✓" if success else "✗"
    encoding = getattr(sys.stdout, "encoding", None)
    try:
        if encoding:
            symbol.encode(encoding)
            return symbol
    except (UnicodeEncodeError, LookupError):
        pass
    return "[ OK ]" if success else "[ FAIL ]"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"pygant version {__version__}")
        raise typer.Exit()


def _select_verbosity(silent: bool, quiet: bool, verbose: bool, debug: bool, config: GantConfig) -> Verbosity:
    """Most verbose flag wins; config (then NORMAL) when no flag is given."""
    if debug:
        return Verbosity.DEBUG
    if verbose:
        return Verbosity.VERBOSE
    if quiet:
        return Verbosity.WARNINGS_AND_ERRORS
    if silent:
        return Verbosity.SILENT
    if config.verbosity is not None:
        return config.verbosity
    return Verbosity.NORMAL


def _parse_definitions(definitions: Optional[List[str]], logger: Logger) -> dict[str, str]:
    """Parse -D name=value options. A bare name is defined as the empty string."""
    result: dict[str, str] = {}
    for definition in definitions or []:
        name, _, value = definition.partition("=")
        name = name.strip()
        if not name:
            logger.error(f"Invalid definition: '{definition}'", style="red", markup=False)
            raise typer.Exit(SCRIPT_ERROR)
        result[name] = value
    return result


def _locate_build_file(file: Optional[str], config: GantConfig, logger: Logger) -> Path:
    if file is not None:
        path = Path(file)
        if not path.is_file():
            logger.error(f"Cannot find file {file}", style="red", markup=False)
            raise typer.Exit(SCRIPT_ERROR)
        return path.resolve()

    filename = config.file or DEFAULT_BUILD_FILE
    path = find_build_file(Path.cwd(), filename)
    if path is None:
        logger.error(f"Cannot find file {filename}", style="red", markup=False)
        raise typer.Exit(SCRIPT_ERROR)
    return path


@app.command()
def run(
    targets: Optional[List[str]] = typer.Argument(None, help="Targets to achieve (default: 'default')"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Build file to use (default: build.gant)"),
    show_targets: bool = typer.Option(False, "--targets", "-T", help="List the targets and their descriptions"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Show the tasks that would run, without running them"),
    silent: bool = typer.Option(False, "--silent", "-s", help="Print nothing"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Print warnings and errors only"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print more information"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Print debugging information"),
    define: Optional[List[str]] = typer.Option(None, "--define", "-D", help="Define NAME=VALUE (repeatable)"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Run targets from a build script."""
    logger = ConsoleLogger(Console())

    try:
        config = load_config(Path(file).parent if file else Path.cwd())
    except ConfigError as e:
        logger.error(str(e), style="red", markup=False)
        raise typer.Exit(SCRIPT_ERROR)

    definitions = dict(config.definitions)
    definitions.update(_parse_definitions(define, logger))
    build_file = _locate_build_file(file, config, logger)

    gant = Gant(logger=logger, engine=TaskEngine(base_dir=build_file.parent, logger=logger))
    gant.state.set_verbosity(_select_verbosity(silent, quiet, verbose, debug, config))
    gant.state.set_dry_run(dry_run or bool(config.dry_run))
    gant.set_build_class_name(build_file.name)
    for name, value in definitions.items():
        gant.define(name, value)

    try:
        gant.load_script(build_file)
    except ScriptError as e:
        logger.line(Verbosity.ERRORS_ONLY, str(e))
        raise typer.Exit(e.exit_code)

    if show_targets:
        list_targets(logger, gant)
        return

    return_code = gant.process_targets(targets or None)
    if return_code != SUCCESS:
        logger.error(f"[red]{_result_marker(False)} Build failed with return code {return_code}[/red]")
        raise typer.Exit(return_code)
    logger.verbose(f"[green]{_result_marker(True)} Build successful[/green]")


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
