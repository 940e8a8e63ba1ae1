"""Console output formatting utilities for msb."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from msb.model import Makefile
    from msb.runner import BuildReport


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_build_started(self, target: str, plan: list[str]) -> None:
        """Print build start information."""
        print("\nBUILD STARTED")
        print(f"Target: {target}")
        print(f"Plan: {' -> '.join(plan)}")

    def print_target_started(self, name: str) -> None:
        """Print target start message."""
        print(f"\nTARGET: {name}")

    def print_command(self, name: str, command: str) -> None:
        """Print a command as it is spawned."""
        print(f"[{name}] {command}")
        sys.stdout.flush()

    def print_target_skipped(self, name: str) -> None:
        print(f"Target `{name}` skipped, up to date")

    def print_target_built(self, name: str, elapsed: float) -> None:
        print(f"Building target `{name}` took: {_format_elapsed(elapsed)}")

    def print_results(self, report: "BuildReport") -> None:
        """Print final results summary."""
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for name, result in report.results.items():
            print(f"  {name}: {result.status.upper()}")

    def print_targets(self, makefile: "Makefile", names: Iterable[str] = ()) -> None:
        """
        Print targets and what they depend on.

        Args:
            makefile: Parsed build description
            names: Only these targets; unknown names are reported as not found
        """
        names = list(names)
        if not names:
            for i, target in enumerate(makefile.targets()):
                print(f"{i}: {target.name}")
                for line in target.describe():
                    print(line)
            return

        for name in names:
            target = makefile.target(name)
            if target is None:
                print(f"{name}: not found")
                continue
            print(f"{target.name}")
            for line in target.describe():
                print(line)

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: BaseException) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exception(type(exc), exc, exc.__traceback__)
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


def _format_elapsed(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.2f}ms"
    return f"{seconds:.2f}s"


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
