from __future__ import annotations

import json
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any, Callable

import pydantic
import structlog

from bootloader.core.errors import (
    IncompatibleSchemaError,
    NewerSchemaError,
    StateCorruptError,
    StateDirectoryMissingError,
)
from bootloader.storage.models import State

logger = structlog.get_logger()

STATE_VERSION = 10
MINIMUM_STATE_VERSION = 3
STATE_FILE_NAME = "bbl-state.json"
STATE_FILE_MODE = 0o644

Serializer = Callable[[dict[str, Any]], str]
IDFactory = Callable[[], str]


def serialize_state(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"


def new_state_id() -> str:
    return str(uuid.uuid4())


class StateStore:
    """Versioned, redacting persistence for one environment's state file."""

    def __init__(
        self,
        directory: str | Path,
        *,
        version: int = STATE_VERSION,
        minimum_version: int = MINIMUM_STATE_VERSION,
        serializer: Serializer = serialize_state,
        id_factory: IDFactory = new_state_id,
    ) -> None:
        self.directory = Path(directory)
        self.version = version
        self.minimum_version = minimum_version
        self._serializer = serializer
        self._id_factory = id_factory

    @property
    def path(self) -> Path:
        return self.directory / STATE_FILE_NAME

    def load(self) -> State:
        """Read the state file, returning an all-zero state when there is none."""
        if not self.directory.is_dir():
            raise StateDirectoryMissingError(str(self.directory))

        if not self.path.exists():
            return State()

        state = self._parse(self.path.read_text())
        if state.is_empty():
            state = State(version=self.version)

        if state.version < self.minimum_version:
            raise IncompatibleSchemaError(state.version)
        if state.version > self.version:
            raise NewerSchemaError(state.version)

        return state

    def _parse(self, content: str) -> State:
        try:
            return State.model_validate(json.loads(content))
        except json.JSONDecodeError as exc:
            raise StateCorruptError(str(self.path), f"invalid JSON: {exc}") from exc
        except pydantic.ValidationError as exc:
            fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
            raise StateCorruptError(str(self.path), f"invalid fields: {fields}") from exc

    def save(self, state: State) -> State:
        """Persist ``state`` and return the working copy stamped with id and version.

        An all-zero state removes the state file instead of writing one.
        """
        if not self.directory.is_dir():
            raise StateDirectoryMissingError(str(self.directory))

        if state.is_empty():
            self.path.unlink(missing_ok=True)
            logger.info("state_deleted", path=str(self.path))
            return state

        stamped = state.model_copy(
            update={"version": self.version, "id": state.id or self._id_factory()}
        )
        self._write(self._serializer(stamped.redacted()))
        logger.debug("state_saved", path=str(self.path), env_id=stamped.env_id)
        return stamped

    def _write(self, content: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".bbl-state-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, STATE_FILE_MODE)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def load_state(directory: str | Path) -> State:
    return StateStore(directory).load()


def save_state(state: State, directory: str | Path) -> State:
    return StateStore(directory).save(state)
