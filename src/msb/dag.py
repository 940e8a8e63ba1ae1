# dag.py
from __future__ import annotations

from typing import Dict, Iterator, List, Set, Tuple

from .errors import DependencyCycle, MissingDependencyTarget, MissingRootTarget
from .model import Makefile, Target


def build_graph(makefile: Makefile) -> Dict[str, List[str]]:
    """
    Adjacency map target -> target dependencies, keyed by name.

    Duplicate names resolve to the first declaration, matching Makefile.target().
    Unresolved dependencies are kept; build_order() reports them.
    """
    adj: Dict[str, List[str]] = {}
    for t in makefile.targets():
        adj.setdefault(t.name, list(t.target_dependencies))
    return adj


def build_order(makefile: Makefile, root: str) -> List[Target]:
    """
    Targets reachable from `root`, dependencies first.

    - Depth-first over target_dependencies in declared order.
    - Every target appears at most once, even when reachable via several paths.
    - Raises MissingRootTarget / MissingDependencyTarget / DependencyCycle
      before anything is executed.
    """
    if makefile.target(root) is None:
        raise MissingRootTarget(target=root)

    adj = build_graph(makefile)
    order: List[str] = []
    done: Set[str] = set()
    # explicit DFS stack: (name, remaining deps); the names on it form the current path
    stack: List[Tuple[str, Iterator[str]]] = [(root, iter(adj[root]))]
    on_path: Set[str] = {root}

    while stack:
        name, deps = stack[-1]
        for dep in deps:
            if dep not in adj:
                raise MissingDependencyTarget(target=name, dependency=dep)
            if dep in on_path:
                path = [n for n, _ in stack]
                raise DependencyCycle(cycle=path[path.index(dep):] + [dep])
            if dep not in done:
                stack.append((dep, iter(adj[dep])))
                on_path.add(dep)
                break
        else:
            stack.pop()
            on_path.discard(name)
            done.add(name)
            order.append(name)

    return [makefile.target(name) for name in order]
