from __future__ import annotations

from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import Any, Callable, Dict, List

import structlog

from bootloader.core.errors import ConfigurationError
from bootloader.providers.base import (
    CloudConfigUpdater,
    CloudProvider,
    DirectorDeployer,
    InfrastructureApplier,
    KeyPairManager,
)

logger = structlog.get_logger()

ENTRY_POINT_GROUP = "bootloader.iaas"


@dataclass(frozen=True)
class IaasBundle:
    """Collaborators an IaaS plugin supplies to the workflows."""

    cloud_provider: CloudProvider
    applier: InfrastructureApplier
    deployer: DirectorDeployer
    cloud_config: CloudConfigUpdater | None = None
    key_pair_updater: KeyPairManager | None = None


IaasFactory = Callable[..., IaasBundle]


@dataclass(frozen=True)
class IaasSpec:
    """Metadata describing a registered IaaS plugin."""

    name: str
    factory: IaasFactory
    description: str | None = None


class IaasRegistry:
    """Simple in-memory registry of IaaS plugins."""

    def __init__(self) -> None:
        self._plugins: Dict[str, IaasSpec] = {}

    def register(
        self,
        name: str,
        factory: IaasFactory,
        *,
        description: str | None = None,
    ) -> None:
        if not name:
            raise ValueError("IaaS name is required")
        self._plugins[name] = IaasSpec(name=name, factory=factory, description=description)

    def create(self, name: str, **kwargs: Any) -> IaasBundle:
        spec = self._plugins.get(name)
        if spec is None:
            raise KeyError(f"IaaS '{name}' is not registered")
        return spec.factory(**kwargs)

    def list(self) -> List[IaasSpec]:
        return list(self._plugins.values())


iaas_registry = IaasRegistry()


def register_iaas(name: str, factory: IaasFactory, *, description: str | None = None) -> None:
    iaas_registry.register(name, factory, description=description)


def create_iaas(name: str, **kwargs: Any) -> IaasBundle:
    return iaas_registry.create(name, **kwargs)


def list_iaas() -> List[IaasSpec]:
    return iaas_registry.list()


def load_plugins() -> None:
    """Import installed plugins; each registers itself on import."""
    for entry_point in entry_points(group=ENTRY_POINT_GROUP):
        try:
            entry_point.load()
        except ImportError as exc:
            logger.warning("iaas_plugin_load_failed", plugin=entry_point.name, error=str(exc))


def bundle_for(name: str, **kwargs: Any) -> IaasBundle:
    """Load installed plugins and build the collaborators for ``name``."""
    load_plugins()
    try:
        return create_iaas(name, **kwargs)
    except KeyError as exc:
        available = ", ".join(sorted(spec.name for spec in list_iaas())) or "none"
        raise ConfigurationError(
            f"no provisioner is installed for iaas '{name}' (available: {available})"
        ) from exc
