"""
The ``destroy`` workflow.

Tears resources down in reverse dependency order (director, jumpbox,
infrastructure, identity), saving after each step. Every step is skipped when
its resource is already gone, so a run interrupted part-way can be repeated.
"""

from __future__ import annotations

from enum import StrEnum

import structlog

from bootloader.core.errors import StateNotFoundError
from bootloader.orchestration.config import DestroyConfig
from bootloader.orchestration.recovery import StateSaver, raise_with_partial_state
from bootloader.providers.base import DirectorDeployer, InfrastructureApplier
from bootloader.storage.models import BOSH, Jumpbox, State

logger = structlog.get_logger()


class DestroyStep(StrEnum):
    DIRECTOR_DELETED = "director_deleted"
    JUMPBOX_DELETED = "jumpbox_deleted"
    INFRASTRUCTURE_DESTROYED = "infrastructure_destroyed"
    IDENTITY_RELEASED = "identity_released"


class Destroy:
    """Removes an environment and, finally, its state file."""

    def __init__(
        self,
        store: StateSaver,
        applier: InfrastructureApplier,
        deployer: DirectorDeployer,
    ) -> None:
        self._store = store
        self._applier = applier
        self._deployer = deployer

    def execute(self, config: DestroyConfig, state: State) -> State:
        if state.is_empty():
            if config.skip_if_missing:
                logger.info("destroy_skipped", reason="no state")
                return state
            raise StateNotFoundError()

        if not state.no_director and not state.bosh.is_empty():
            try:
                state = self._deployer.delete_director(state)
            except Exception as exc:
                raise_with_partial_state(self._store, exc)
            state = self._save(state.model_copy(update={"bosh": BOSH()}), DestroyStep.DIRECTOR_DELETED)

        if not state.jumpbox.is_empty():
            try:
                state = self._deployer.delete_jumpbox(state)
            except Exception as exc:
                raise_with_partial_state(self._store, exc)
            state = self._save(
                state.model_copy(update={"jumpbox": Jumpbox()}), DestroyStep.JUMPBOX_DELETED
            )

        if state.tf_state:
            try:
                state = self._applier.destroy(state)
            except Exception as exc:
                raise_with_partial_state(self._store, exc)
            state = self._save(
                state.model_copy(update={"tf_state": "", "latest_tf_output": ""}),
                DestroyStep.INFRASTRUCTURE_DESTROYED,
            )

        released = self._save(State(), DestroyStep.IDENTITY_RELEASED)
        logger.info("destroy_complete", env_id=state.env_id)
        return released

    def _save(self, state: State, step: DestroyStep) -> State:
        state = self._store.save(state)
        logger.info("destroy_step_completed", step=step.value, env_id=state.env_id)
        return state
