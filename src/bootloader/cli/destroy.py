"""
CLI command that tears an environment down.
"""

from __future__ import annotations

from bootloader.cli.ux import confirm, info, success, warning
from bootloader.config import Settings, apply_credentials, get_settings
from bootloader.core.errors import ExitCode, StateNotFoundError, main_with_error_handling
from bootloader.logging import bind_context
from bootloader.orchestration import Destroy, DestroyConfig
from bootloader.providers.registry import bundle_for
from bootloader.storage.store import StateStore


@main_with_error_handling()
def destroy_command(
    state_dir: str | None = None,
    no_confirm: bool = False,
    skip_if_missing: bool = False,
    settings: Settings | None = None,
) -> int:
    settings = settings or get_settings()
    store = StateStore(state_dir or settings.state_dir)
    state = store.load()

    if state.is_empty():
        if skip_if_missing:
            info("state file not found, and --skip-if-missing flag provided, exiting")
            return ExitCode.SUCCESS
        raise StateNotFoundError()

    if not no_confirm:
        prompt = (
            f"Are you sure you want to delete infrastructure for {state.env_id}? "
            "This operation cannot be undone!"
        )
        if not confirm(prompt):
            warning("destroy cancelled, exiting")
            return ExitCode.SUCCESS

    state = apply_credentials(state, settings)
    log = bind_context(state_dir=str(store.directory), env_id=state.env_id)

    bundle = bundle_for(state.iaas, settings=settings)
    destroy = Destroy(store, bundle.applier, bundle.deployer)
    destroy.execute(DestroyConfig(skip_if_missing=skip_if_missing), state)

    log.info("destroy_complete")
    success(f"environment {state.env_id} destroyed")
    return ExitCode.SUCCESS
