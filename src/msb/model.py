# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from .runner import BuildReport
    from .settings import BuildOptions


@dataclass(frozen=True)
class Target:
    """
    A build target: outputs + dependencies + the commands that produce the outputs.

    `outputs` is never empty: a target without an explicit outputs clause
    produces a file named after itself.
    """
    name: str
    outputs: Tuple[str, ...] = ()
    file_dependencies: Tuple[str, ...] = ()
    target_dependencies: Tuple[str, ...] = ()
    commands: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "outputs", tuple(self.outputs) or (self.name,))
        object.__setattr__(self, "file_dependencies", tuple(self.file_dependencies))
        object.__setattr__(self, "target_dependencies", tuple(self.target_dependencies))
        object.__setattr__(self, "commands", tuple(self.commands))

    def describe(self) -> List[str]:
        """Human-readable dependency summary used by `msb targets`."""
        if not self.file_dependencies and not self.target_dependencies:
            return ["Does not depend on anything"]

        lines = ["Depends on:"]
        if self.file_dependencies:
            lines.append("  These files:")
            lines.extend(f"    {f}" for f in self.file_dependencies)
        if self.target_dependencies:
            lines.append("  These targets:")
            lines.extend(f"    {t}" for t in self.target_dependencies)
        return lines


@dataclass(frozen=True)
class Makefile:
    """Parsed build description. Read-only after construction."""
    _targets: Tuple[Target, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_targets", tuple(self._targets))

    def targets(self) -> List[Target]:
        return list(self._targets)

    def target(self, name: str) -> Optional[Target]:
        # first match wins; duplicate names are not rejected
        for t in self._targets:
            if t.name == name:
                return t
        return None

    def __len__(self) -> int:
        return len(self._targets)

    def build(
        self,
        name: str,
        *,
        cwd: str | Path | None = None,
        options: "BuildOptions | None" = None,
    ) -> "BuildReport":
        from .runner import build

        return build(self, name, cwd=cwd, options=options)
