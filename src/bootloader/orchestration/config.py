from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UpConfig:
    """Operator input for one ``up`` run."""

    name: str = ""
    no_director: bool = False
    ops_file: str = ""


@dataclass(frozen=True)
class DestroyConfig:
    """Operator input for one ``destroy`` run."""

    skip_if_missing: bool = False
