"""
Collaborator contracts consumed by the provisioning workflows.

Concrete implementations live in IaaS plugins; failures that still produced
state should implement ``PartialStateProvider`` (see bootloader.core.errors).
"""

from __future__ import annotations

from typing import Any, Protocol

from bootloader.storage.models import KeyPair, State


class CloudProvider(Protocol):
    """IaaS SDK queries needed before any infrastructure exists."""

    def zones_for(self, region: str) -> list[str]:
        ...

    def name_exists(self, name: str) -> bool:
        ...


class InfrastructureApplier(Protocol):
    """Runs the infrastructure-as-code tool against the state's snapshot."""

    def apply(self, state: State) -> State:
        ...

    def get_outputs(self, state: State) -> dict[str, Any]:
        ...

    def destroy(self, state: State) -> State:
        ...


class DirectorDeployer(Protocol):
    """Deploys and deletes the jumpbox and the director."""

    def create_jumpbox(self, state: State, outputs: dict[str, Any]) -> State:
        ...

    def create_director(self, state: State, outputs: dict[str, Any]) -> State:
        ...

    def delete_director(self, state: State) -> State:
        ...

    def delete_jumpbox(self, state: State) -> State:
        ...


class CloudConfigUpdater(Protocol):
    """Renders and uploads the director's cloud config."""

    def update(self, state: State, outputs: dict[str, Any]) -> None:
        ...


class KeyPairManager(Protocol):
    """Creates ssh key material and registers it with the IaaS."""

    def update(self) -> KeyPair:
        ...


class OutputsReader(Protocol):
    def get_outputs(self, state: State) -> dict[str, Any]:
        ...
