"""
Environment identity resolution.

Picks the name every provisioned resource is tagged with: the existing one on
re-runs, the operator's choice when it is free, or a generated one.
"""

from __future__ import annotations

from typing import Callable

import structlog

from bootloader.core.errors import (
    EnvIDGenerationError,
    EnvNameAlreadyExistsError,
    InvalidEnvNameError,
)
from bootloader.identity.names import generate_env_name, is_valid_name
from bootloader.providers.base import CloudProvider
from bootloader.storage.models import State

logger = structlog.get_logger()

DEFAULT_GENERATION_ATTEMPTS = 5


class EnvIDResolver:
    """Obtains or validates the environment id for a state."""

    def __init__(
        self,
        cloud_provider: CloudProvider,
        *,
        name_generator: Callable[[], str] = generate_env_name,
        max_attempts: int = DEFAULT_GENERATION_ATTEMPTS,
    ) -> None:
        self._cloud_provider = cloud_provider
        self._name_generator = name_generator
        self._max_attempts = max_attempts

    def sync(self, state: State, name: str = "") -> State:
        """Return ``state`` with ``env_id`` resolved.

        An already-set env id wins over ``name``; the caller persists the result.
        """
        if state.env_id:
            return state

        env_id = self._validate(name) if name else self._generate()
        logger.info("env_id_resolved", env_id=env_id, requested=bool(name))
        return state.model_copy(update={"env_id": env_id})

    def _validate(self, name: str) -> str:
        if not is_valid_name(name):
            raise InvalidEnvNameError(name)
        if self._cloud_provider.name_exists(name):
            raise EnvNameAlreadyExistsError(name)
        return name

    def _generate(self) -> str:
        for _ in range(self._max_attempts):
            candidate = self._name_generator()
            if not self._cloud_provider.name_exists(candidate):
                return candidate
            logger.debug("env_id_collision", candidate=candidate)
        raise EnvIDGenerationError(self._max_attempts)
