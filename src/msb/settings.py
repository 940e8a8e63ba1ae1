# settings.py
from __future__ import annotations

import os
from dataclasses import dataclass

COMMAND_MODES = ("concurrent", "sequential")
STALENESS_MODES = ("shallow", "deep")

BUILD_FILE = os.environ.get("MSB_BUILD_FILE", "build.msb")
TARGET = os.environ.get("MSB_TARGET", "main")


def _choice(var: str, default: str, allowed: tuple[str, ...]) -> str:
    value = os.environ.get(var, default).strip().lower()
    if value not in allowed:
        raise ValueError(f"{var} must be one of {', '.join(allowed)}, got: {value!r}")
    return value


@dataclass(frozen=True)
class BuildOptions:
    """
    Knobs for a single build request.

    command_mode:
      - "concurrent": spawn every command of a target, then wait for all of them
      - "sequential": spawn one command, wait for it, then the next
    deep_staleness:
      re-check target dependencies' own inputs instead of only their outputs
    """
    command_mode: str = "concurrent"
    deep_staleness: bool = False

    def __post_init__(self) -> None:
        if self.command_mode not in COMMAND_MODES:
            raise ValueError(
                f"command_mode must be one of {', '.join(COMMAND_MODES)}, got: {self.command_mode!r}"
            )

    @classmethod
    def from_env(cls) -> "BuildOptions":
        return cls(
            command_mode=_choice("MSB_COMMAND_MODE", "concurrent", COMMAND_MODES),
            deep_staleness=_choice("MSB_STALENESS", "shallow", STALENESS_MODES) == "deep",
        )
