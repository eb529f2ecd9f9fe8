"""Orchestration package: the up and destroy workflows."""

from bootloader.orchestration.config import DestroyConfig, UpConfig
from bootloader.orchestration.destroy import Destroy, DestroyStep
from bootloader.orchestration.recovery import persist_partial_state
from bootloader.orchestration.up import Up, UpStep

__all__ = [
    "Destroy",
    "DestroyConfig",
    "DestroyStep",
    "Up",
    "UpConfig",
    "UpStep",
    "persist_partial_state",
]
