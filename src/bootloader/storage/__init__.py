"""Environment state model and its on-disk store."""

from bootloader.storage.models import AWS, BOSH, GCP, LB, Azure, Jumpbox, KeyPair, State
from bootloader.storage.store import (
    STATE_FILE_NAME,
    STATE_VERSION,
    StateStore,
    load_state,
    save_state,
)

__all__ = [
    "AWS",
    "Azure",
    "BOSH",
    "GCP",
    "Jumpbox",
    "KeyPair",
    "LB",
    "State",
    "StateStore",
    "STATE_FILE_NAME",
    "STATE_VERSION",
    "load_state",
    "save_state",
]
