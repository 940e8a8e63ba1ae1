# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


class MsbError(Exception):
    """Base class for every error msb reports to the user."""

    kind = "error"


@dataclass
class BuildFileNotFound(MsbError):
    path: str

    kind = "build-file-not-found"

    def __str__(self) -> str:
        return f"Build file does not exist: {self.path}"


# ----------------------------------------------------------------------
# Parse errors
# ----------------------------------------------------------------------

@dataclass
class ParseError(MsbError):
    """
    Structured parse error with enough context for:
      - clean CLI output
      - pointing at the offending line of the build file
    """
    message: str
    line: int
    target: Optional[str] = None

    kind = "parse-error"

    def __str__(self) -> str:
        where = f"line {self.line}"
        if self.target:
            where += f", target '{self.target}'"
        return f"{self.kind}: {self.message} ({where})"


class InvalidTargetFormat(ParseError):
    kind = "invalid-target-format"


class InvalidTargetHeader(ParseError):
    kind = "invalid-target-header"


class InvalidDependencyBlock(ParseError):
    kind = "invalid-dependency-block"


class MismatchedBraces(ParseError):
    kind = "mismatched-braces"


# ----------------------------------------------------------------------
# Build errors
# ----------------------------------------------------------------------

class BuildError(MsbError):
    kind = "build-error"


@dataclass
class MissingRootTarget(BuildError):
    target: str

    kind = "missing-target"

    def __str__(self) -> str:
        return f"No target named '{self.target}' in the build file"


@dataclass
class MissingDependencyTarget(BuildError):
    target: str
    dependency: str

    kind = "missing-dependency"

    def __str__(self) -> str:
        return f"Target '{self.target}' depends on missing target '{self.dependency}'"


@dataclass
class DependencyCycle(BuildError):
    cycle: List[str] = field(default_factory=list)

    kind = "dependency-cycle"

    def __str__(self) -> str:
        return "Dependency cycle: " + " -> ".join(self.cycle)


@dataclass
class ProcessSpawnFailure(BuildError):
    target: str
    command: str
    reason: str = ""

    kind = "spawn-failed"

    def __str__(self) -> str:
        msg = f"[{self.target}] could not start: {self.command}"
        if self.reason:
            msg += f" ({self.reason})"
        return msg


@dataclass
class ProcessWaitFailure(BuildError):
    target: str
    command: str
    reason: str = ""

    kind = "wait-failed"

    def __str__(self) -> str:
        msg = f"[{self.target}] failed waiting for: {self.command}"
        if self.reason:
            msg += f" ({self.reason})"
        return msg


@dataclass
class MissingExitCode(BuildError):
    target: str
    command: str
    signal: Optional[int] = None

    kind = "missing-exit-code"

    def __str__(self) -> str:
        msg = f"[{self.target}] terminated without an exit code: {self.command}"
        if self.signal is not None:
            msg += f" (signal {self.signal})"
        return msg


@dataclass
class NonZeroExit(BuildError):
    target: str
    command: str
    exit_code: int

    kind = "non-zero-exit"

    def __str__(self) -> str:
        return f"[{self.target}] command failed (exit={self.exit_code}): {self.command}"
