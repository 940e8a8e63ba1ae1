# dsl.py
from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from .errors import (
    BuildFileNotFound,
    InvalidDependencyBlock,
    InvalidTargetFormat,
    InvalidTargetHeader,
    MismatchedBraces,
)
from .model import Makefile, Target

_NAME_RE = re.compile(r"[A-Za-z0-9]+")
_COMMENT_RE = re.compile(r"^[ \t]*#.*$", re.MULTILINE)


# ---------------------------------------------------------------------
# Pre-passes
# ---------------------------------------------------------------------

def _strip_comments(source: str) -> str:
    # blank the line instead of removing it so line numbers stay correct
    return _COMMENT_RE.sub("", source)


def _check_braces(source: str) -> None:
    """Whole-source brace balance: the depth counter must end at zero and never go negative."""
    open_lines: List[int] = []
    line = 1
    for ch in source:
        if ch == "\n":
            line += 1
        elif ch == "{":
            open_lines.append(line)
        elif ch == "}":
            if not open_lines:
                raise MismatchedBraces("unexpected '}' without a matching '{'", line)
            open_lines.pop()

    if open_lines:
        raise MismatchedBraces("'{' is never closed", open_lines[-1])


def _split_commands(body: str) -> List[str]:
    commands: List[str] = []
    for line in body.splitlines():
        for piece in line.split(";"):
            piece = piece.strip()
            if piece:
                commands.append(piece)
    return commands


# ---------------------------------------------------------------------
# Declaration parser
# ---------------------------------------------------------------------

class _Parser:
    """Cursor over the (comment-stripped) build description."""

    def __init__(self, source: str):
        self.src = source
        self.pos = 0

    def line(self, pos: Optional[int] = None) -> int:
        return self.src.count("\n", 0, self.pos if pos is None else pos) + 1

    def skip_ws(self) -> None:
        while self.pos < len(self.src) and self.src[self.pos].isspace():
            self.pos += 1

    def at_end(self) -> bool:
        self.skip_ws()
        return self.pos >= len(self.src)

    def accept(self, literal: str) -> bool:
        self.skip_ws()
        if self.src.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def peek(self) -> str:
        return self.src[self.pos] if self.pos < len(self.src) else ""

    def until_close_paren(self) -> Optional[str]:
        """Consume up to and including the next ')'; returns the enclosed text or None."""
        end = self.src.find(")", self.pos)
        if end < 0:
            return None
        content = self.src[self.pos:end]
        self.pos = end + 1
        return content

    def block_body(self) -> Optional[str]:
        """Consume a brace block whose '{' was just accepted; returns its body."""
        depth = 1
        start = self.pos
        for i in range(self.pos, len(self.src)):
            ch = self.src[i]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    self.pos = i + 1
                    return self.src[start:i]
        return None

    # ---- grammar ----

    def parse_target(self) -> Target:
        start = self.pos
        if not self.accept("target") or not self.peek().isspace():
            raise InvalidTargetFormat("expected a declaration of the form 'target <name> [...] { ... }'", self.line(start))

        self.skip_ws()
        m = _NAME_RE.match(self.src, self.pos)
        if m is None:
            raise InvalidTargetFormat("expected a target name after 'target'", self.line())
        name = m.group(0)
        self.pos = m.end()
        nxt = self.peek()
        if nxt and not nxt.isspace() and nxt not in "[{":
            raise InvalidTargetFormat(
                f"target names must be alphanumeric, found {nxt!r} after {name!r}", self.line(), name
            )

        outputs: List[str] = []
        if self.accept("outputs("):
            content = self.until_close_paren()
            if content is None:
                raise InvalidTargetHeader("'outputs(' is never closed", self.line(), name)
            outputs = content.split()

        if not self.accept("["):
            raise InvalidTargetHeader("missing '[' opening the dependency block", self.line(), name)

        files, target_deps = self.parse_dependencies(name)

        if not self.accept("]"):
            raise InvalidTargetHeader("missing ']' closing the dependency block", self.line(), name)

        if not self.accept("{"):
            raise InvalidTargetFormat("missing '{' opening the command block", self.line(), name)
        body = self.block_body()
        if body is None:
            raise InvalidTargetFormat("missing '}' closing the command block", self.line(), name)

        return Target(
            name=name,
            outputs=tuple(outputs),
            file_dependencies=tuple(files),
            target_dependencies=tuple(target_deps),
            commands=tuple(_split_commands(body)),
        )

    def parse_dependencies(self, name: str) -> tuple[List[str], List[str]]:
        if not self.accept("files("):
            raise InvalidDependencyBlock("expected 'files(' at the start of the dependency block", self.line(), name)
        content = self.until_close_paren()
        if content is None:
            raise InvalidDependencyBlock("'files(' is never closed", self.line(), name)
        files = content.split()

        if not self.accept("targets("):
            raise InvalidDependencyBlock("expected 'targets(' after the files block", self.line(), name)
        content = self.until_close_paren()
        if content is None:
            raise InvalidDependencyBlock("'targets(' is never closed", self.line(), name)

        target_deps: List[str] = []
        for entry in content.split(","):
            entry = entry.strip()
            if not entry:
                continue
            if any(ch.isspace() for ch in entry):
                raise InvalidDependencyBlock(
                    f"target dependencies must be separated by commas, got {entry!r}", self.line(), name
                )
            target_deps.append(entry)
        return files, target_deps


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse(source: str) -> Makefile:
    """
    Parse a build description into a Makefile.

    All-or-nothing: any malformed declaration raises a ParseError subclass
    and no targets are returned.
    """
    source = _strip_comments(source)
    _check_braces(source)

    parser = _Parser(source)
    targets: List[Target] = []
    while not parser.at_end():
        targets.append(parser.parse_target())
    return Makefile(tuple(targets))


def parse_file(path: str | Path) -> Makefile:
    build_path = Path(path).expanduser()
    if not build_path.is_file():
        raise BuildFileNotFound(str(build_path))
    return parse(build_path.read_text(encoding="utf-8"))
