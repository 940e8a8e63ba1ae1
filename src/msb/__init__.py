from .dsl import parse, parse_file
from .model import Makefile, Target
from .runner import build, BuildReport, TargetResult
from .settings import BuildOptions
from .errors import (
    MsbError,
    BuildFileNotFound,
    ParseError,
    InvalidTargetFormat,
    InvalidTargetHeader,
    InvalidDependencyBlock,
    MismatchedBraces,
    BuildError,
    MissingRootTarget,
    MissingDependencyTarget,
    DependencyCycle,
    ProcessSpawnFailure,
    ProcessWaitFailure,
    MissingExitCode,
    NonZeroExit,
)

__all__ = [
    "parse", "parse_file", "Makefile", "Target", "build", "BuildReport", "TargetResult", "BuildOptions",
    "MsbError", "BuildFileNotFound", "ParseError", "InvalidTargetFormat", "InvalidTargetHeader",
    "InvalidDependencyBlock", "MismatchedBraces", "BuildError", "MissingRootTarget",
    "MissingDependencyTarget", "DependencyCycle", "ProcessSpawnFailure", "ProcessWaitFailure",
    "MissingExitCode", "NonZeroExit",
]
