# runner.py
from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .dag import build_order
from .errors import (
    BuildError,
    MissingExitCode,
    NonZeroExit,
    ProcessSpawnFailure,
    ProcessWaitFailure,
)
from .model import Makefile, Target
from .settings import BuildOptions
from .staleness import is_up_to_date
from .ui.console import Console, get_console


@dataclass
class TargetResult:
    name: str
    status: str          # "built" | "skipped"
    elapsed: float = 0.0


@dataclass
class BuildReport:
    """Outcome of a successful build request, one entry per visited target in build order."""
    root: str
    results: Dict[str, TargetResult] = field(default_factory=dict)

    @property
    def built(self) -> List[str]:
        return [n for n, r in self.results.items() if r.status == "built"]

    @property
    def skipped(self) -> List[str]:
        return [n for n, r in self.results.items() if r.status == "skipped"]


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

def tokenize(command: str) -> List[str]:
    """Program + args, split on whitespace. No quoting, no escaping, no expansion."""
    return command.split()


def _spawn(target: Target, command: str, cwd: Path) -> subprocess.Popen:
    argv = tokenize(command)
    try:
        return subprocess.Popen(argv, cwd=str(cwd))
    except (OSError, ValueError) as e:
        # ValueError: argv Popen refuses outright, e.g. an embedded NUL byte
        raise ProcessSpawnFailure(
            target=target.name, command=command, reason=getattr(e, "strerror", None) or str(e)
        ) from e


def _wait(target: Target, command: str, proc: subprocess.Popen) -> None:
    try:
        code = proc.wait()
    except OSError as e:
        raise ProcessWaitFailure(target=target.name, command=command, reason=e.strerror or str(e)) from e

    if code < 0:
        # killed by a signal: no exit code
        raise MissingExitCode(target=target.name, command=command, signal=-code)
    if code != 0:
        raise NonZeroExit(target=target.name, command=command, exit_code=code)


def _run_concurrent(target: Target, cwd: Path, console: Console) -> None:
    procs: List[Tuple[str, subprocess.Popen]] = []
    try:
        for command in target.commands:
            console.print_command(target.name, command)
            procs.append((command, _spawn(target, command, cwd)))
    except ProcessSpawnFailure:
        # don't leave already started siblings behind
        for _command, proc in procs:
            proc.wait()
        raise

    first_error: Optional[BuildError] = None
    for command, proc in procs:
        try:
            _wait(target, command, proc)
        except BuildError as e:
            if first_error is None:
                first_error = e
    if first_error is not None:
        raise first_error


def _run_sequential(target: Target, cwd: Path, console: Console) -> None:
    for command in target.commands:
        console.print_command(target.name, command)
        _wait(target, command, _spawn(target, command, cwd))


def _build_target(
    target: Target,
    makefile: Makefile,
    cwd: Path,
    options: BuildOptions,
    console: Console,
) -> TargetResult:
    console.print_target_started(target.name)

    if is_up_to_date(target, makefile, cwd, deep=options.deep_staleness):
        console.print_target_skipped(target.name)
        return TargetResult(name=target.name, status="skipped")

    started = time.perf_counter()
    if options.command_mode == "sequential":
        _run_sequential(target, cwd, console)
    else:
        _run_concurrent(target, cwd, console)
    elapsed = time.perf_counter() - started

    console.print_target_built(target.name, elapsed)
    return TargetResult(name=target.name, status="built", elapsed=elapsed)


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def build(
    makefile: Makefile,
    name: str,
    *,
    cwd: str | Path | None = None,
    options: BuildOptions | None = None,
    console: Console | None = None,
) -> BuildReport:
    """
    Bring `name` and everything it depends on up to date.

    - Dependencies are built first, each target at most once.
    - Up-to-date targets are skipped without running any command.
    - The first failure raises a BuildError and aborts the remaining build;
      targets already built are left as they are.
    """
    console = console or get_console()
    options = options or BuildOptions()
    work_dir = Path(cwd) if cwd is not None else Path.cwd()

    plan = build_order(makefile, name)
    console.print_build_started(name, [t.name for t in plan])
    console.print_debug(f"working directory: {work_dir}")
    console.print_debug(f"command mode: {options.command_mode}, deep staleness: {options.deep_staleness}")

    report = BuildReport(root=name)
    for target in plan:
        report.results[target.name] = _build_target(target, makefile, work_dir, options, console)
    return report
