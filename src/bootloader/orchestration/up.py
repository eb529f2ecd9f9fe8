"""
The ``up`` workflow.

Steps run strictly in order and the working state is saved after each one,
so a run interrupted at any point resumes from the last completed step:

    identity -> zones -> [key pair] -> infrastructure -> outputs
             -> (no director: done) -> jumpbox -> director -> cloud config

Infrastructure and deployer failures that carry partial state get that state
saved before the failure is reported.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Callable

import structlog

from bootloader.core.errors import DirectorAlreadyExistsError, OpsFileReadError
from bootloader.identity.resolver import EnvIDResolver
from bootloader.orchestration.config import UpConfig
from bootloader.orchestration.recovery import StateSaver, raise_with_partial_state
from bootloader.providers.base import (
    CloudConfigUpdater,
    CloudProvider,
    DirectorDeployer,
    InfrastructureApplier,
    KeyPairManager,
)
from bootloader.storage.models import State

logger = structlog.get_logger()


class UpStep(StrEnum):
    IDENTITY_SYNCED = "identity_synced"
    ZONES_DISCOVERED = "zones_discovered"
    KEY_PAIR_CREATED = "key_pair_created"
    INFRASTRUCTURE_APPLIED = "infrastructure_applied"
    OUTPUTS_RETRIEVED = "outputs_retrieved"
    JUMPBOX_CREATED = "jumpbox_created"
    DIRECTOR_CREATED = "director_created"
    CLOUD_CONFIG_UPDATED = "cloud_config_updated"
    COMPLETE = "complete"


def _read_text(path: str) -> str:
    return Path(path).read_text()


class Up:
    """Provisions an environment, converging on re-runs."""

    def __init__(
        self,
        store: StateSaver,
        env_id_resolver: EnvIDResolver,
        cloud_provider: CloudProvider,
        applier: InfrastructureApplier,
        deployer: DirectorDeployer,
        cloud_config: CloudConfigUpdater,
        *,
        key_pair_updater: KeyPairManager | None = None,
        read_file: Callable[[str], str] = _read_text,
    ) -> None:
        self._store = store
        self._env_id_resolver = env_id_resolver
        self._cloud_provider = cloud_provider
        self._applier = applier
        self._deployer = deployer
        self._cloud_config = cloud_config
        self._key_pair_updater = key_pair_updater
        self._read_file = read_file

    def execute(self, config: UpConfig, state: State) -> State:
        """Run the workflow and return the final working state."""
        if config.no_director and state.has_director():
            raise DirectorAlreadyExistsError()

        state = self._env_id_resolver.sync(state, config.name)
        if config.no_director:
            state = state.model_copy(update={"no_director": True})
        state = self._save(state, UpStep.IDENTITY_SYNCED)

        zones = self._cloud_provider.zones_for(state.region)
        state = self._save(state.with_zones(zones), UpStep.ZONES_DISCOVERED)

        if self._key_pair_updater is not None and state.key_pair.is_empty():
            key_pair = self._key_pair_updater.update()
            state = self._save(state.model_copy(update={"key_pair": key_pair}), UpStep.KEY_PAIR_CREATED)

        try:
            state = self._applier.apply(state)
        except Exception as exc:
            raise_with_partial_state(self._store, exc)
        state = self._save(state, UpStep.INFRASTRUCTURE_APPLIED)

        outputs = self._applier.get_outputs(state)
        self._log_step(state, UpStep.OUTPUTS_RETRIEVED)

        if state.no_director:
            self._log_step(state, UpStep.COMPLETE)
            return state

        ops_file_contents = self._read_ops_file(config.ops_file)

        try:
            state = self._deployer.create_jumpbox(_with_ops_file(state, ops_file_contents), outputs)
        except Exception as exc:
            raise_with_partial_state(self._store, exc)
        state = self._save(state, UpStep.JUMPBOX_CREATED)

        try:
            state = self._deployer.create_director(_with_ops_file(state, ops_file_contents), outputs)
        except Exception as exc:
            raise_with_partial_state(self._store, exc)
        state = self._save(state, UpStep.DIRECTOR_CREATED)

        self._cloud_config.update(state, outputs)
        self._log_step(state, UpStep.CLOUD_CONFIG_UPDATED)

        self._log_step(state, UpStep.COMPLETE)
        return state

    def _read_ops_file(self, path: str) -> str | None:
        if not path:
            return None
        try:
            return self._read_file(path)
        except OSError as exc:
            raise OpsFileReadError(exc) from exc

    def _save(self, state: State, step: UpStep) -> State:
        state = self._store.save(state)
        self._log_step(state, step)
        return state

    def _log_step(self, state: State, step: UpStep) -> None:
        logger.info("up_step_completed", step=step.value, env_id=state.env_id)


def _with_ops_file(state: State, contents: str | None) -> State:
    if contents is None:
        return state
    bosh = state.bosh.model_copy(update={"user_ops_file": contents})
    return state.model_copy(update={"bosh": bosh})
