# staleness.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Set

from .model import Makefile, Target


def _mtime(path: str, cwd: Path) -> Optional[int]:
    try:
        return (cwd / path).stat().st_mtime_ns
    except OSError:
        return None


def min_output_time(target: Target, cwd: str | Path = ".") -> Optional[int]:
    """
    Earliest modification time (ns) among the target's outputs.

    None when any output is missing or unreadable: the target counts as not built.
    """
    base = Path(cwd)
    times = []
    for out in target.outputs:
        t = _mtime(out, base)
        if t is None:
            return None
        times.append(t)
    return min(times)


def is_up_to_date(
    target: Target,
    makefile: Makefile,
    cwd: str | Path = ".",
    *,
    deep: bool = False,
) -> bool:
    """
    True when every output exists and nothing the target depends on is newer.

    Target dependencies are compared by their own outputs only (one level).
    With deep=True each dependency's own inputs are re-checked transitively too.
    """
    return _is_up_to_date(target, makefile, Path(cwd), deep, set())


def _shallow_up_to_date(target: Target, makefile: Makefile, cwd: Path) -> bool:
    built_at = min_output_time(target, cwd)
    if built_at is None:
        return False

    for path in target.file_dependencies:
        t = _mtime(path, cwd)
        if t is None or t > built_at:
            return False

    for name in target.target_dependencies:
        dep = makefile.target(name)
        if dep is None:
            return False
        dep_built_at = min_output_time(dep, cwd)
        if dep_built_at is None or dep_built_at > built_at:
            return False

    return True


def _is_up_to_date(target: Target, makefile: Makefile, cwd: Path, deep: bool, seen: Set[str]) -> bool:
    seen.add(target.name)
    pending: List[Target] = [target]

    while pending:
        current = pending.pop()
        if not _shallow_up_to_date(current, makefile, cwd):
            return False
        if not deep:
            break
        for name in current.target_dependencies:
            # resolvable: the shallow check above fails on unknown names
            dep = makefile.target(name)
            if dep.name not in seen:
                seen.add(dep.name)
                pending.append(dep)

    return True
