# cli.py
from __future__ import annotations

import sys
from pathlib import Path

import click

from msb import settings
from msb.dsl import parse_file
from msb.errors import BuildError, BuildFileNotFound, ParseError
from msb.runner import build
from msb.settings import BuildOptions
from msb.ui.console import Console, get_console, set_console


def load_build_file(path: str):
    """
    Parse a build file, reporting failures through the console.

    Raises:
        SystemExit: If the file is missing or malformed
    """
    console = get_console()
    try:
        return parse_file(path)
    except BuildFileNotFound as e:
        console.print_error(
            "Build file not found",
            str(e),
            suggestion="Create a build.msb file or pass the path explicitly:\n  msb build path/to/build.msb main",
        )
        sys.exit(1)
    except ParseError as e:
        console.print_error(
            "Failed to parse build file",
            f"Could not parse {path}",
            details=[str(e)],
        )
        sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """Minimal timestamp-driven build tool."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command("build")
@click.argument("build_file", default=settings.BUILD_FILE)
@click.argument("target", default=settings.TARGET)
@click.option(
    "--sequential/--concurrent",
    default=None,
    help="Run a target's commands one at a time instead of all at once (default: MSB_COMMAND_MODE or concurrent)",
)
@click.option(
    "--deep",
    is_flag=True,
    default=False,
    help="Also re-check target dependencies' own inputs when deciding staleness",
)
@click.option(
    "-C",
    "--cwd",
    default=None,
    type=click.Path(file_okay=False, exists=True),
    help="Working directory for commands and paths (defaults to the build file's directory)",
)
@click.pass_context
def build_cmd(ctx, build_file, target, sequential, deep, cwd):
    """Build TARGET from BUILD_FILE."""
    console = get_console()

    try:
        options = BuildOptions.from_env()
    except ValueError as e:
        console.print_error("Invalid configuration", str(e))
        sys.exit(1)

    if sequential is not None:
        options = BuildOptions(
            command_mode="sequential" if sequential else "concurrent",
            deep_staleness=options.deep_staleness,
        )
    if deep:
        options = BuildOptions(command_mode=options.command_mode, deep_staleness=True)

    makefile = load_build_file(build_file)
    work_dir = Path(cwd) if cwd else Path(build_file).resolve().parent

    try:
        report = build(makefile, target, cwd=work_dir, options=options, console=console)
        console.print_results(report)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except BuildError as e:
        console.print_error("Build failed", str(e), details=[f"kind={e.kind}"])
        sys.exit(1)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


@cli.command("targets")
@click.argument("build_file", default=settings.BUILD_FILE)
@click.argument("names", nargs=-1)
def targets_cmd(build_file, names):
    """List the targets in BUILD_FILE (or only NAMES) and what they depend on."""
    console = get_console()
    makefile = load_build_file(build_file)
    console.print_targets(makefile, names)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
