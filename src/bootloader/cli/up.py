"""
CLI command that provisions (or converges) an environment.
"""

from __future__ import annotations

from bootloader.cli.ux import header, success
from bootloader.clients.director import DirectorClient
from bootloader.clients.retry import Retrier
from bootloader.cloudconfig.manager import CloudConfigManager
from bootloader.config import Settings, apply_credentials, get_settings
from bootloader.core.errors import ExitCode, main_with_error_handling
from bootloader.identity.resolver import EnvIDResolver
from bootloader.logging import bind_context
from bootloader.orchestration import Up, UpConfig
from bootloader.providers.registry import IaasBundle, bundle_for
from bootloader.storage.store import StateStore


def build_up(store: StateStore, bundle: IaasBundle, settings: Settings) -> Up:
    """Wire the up workflow from an IaaS bundle."""
    retrier = Retrier(settings.retry_attempts, settings.retry_delay)
    cloud_config = bundle.cloud_config or CloudConfigManager(
        client_factory=lambda state: DirectorClient.from_state(
            state, retrier=retrier, timeout=settings.http_timeout
        )
    )
    return Up(
        store,
        EnvIDResolver(bundle.cloud_provider),
        bundle.cloud_provider,
        bundle.applier,
        bundle.deployer,
        cloud_config,
        key_pair_updater=bundle.key_pair_updater,
    )


@main_with_error_handling()
def up_command(
    state_dir: str | None = None,
    iaas: str | None = None,
    name: str = "",
    no_director: bool = False,
    ops_file: str = "",
    settings: Settings | None = None,
) -> int:
    settings = settings or get_settings()
    store = StateStore(state_dir or settings.state_dir)
    state = apply_credentials(store.load(), settings, iaas)
    log = bind_context(state_dir=str(store.directory), iaas=state.iaas)

    bundle = bundle_for(state.iaas, settings=settings)
    up = build_up(store, bundle, settings)

    header(f"bootloader up ({state.iaas})")
    final = up.execute(UpConfig(name=name, no_director=no_director, ops_file=ops_file), state)

    log.info("up_complete", env_id=final.env_id, no_director=final.no_director)
    success(f"environment {final.env_id} is up")
    return ExitCode.SUCCESS
