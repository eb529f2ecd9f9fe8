"""Collaborator contracts and the IaaS plugin registry."""

from bootloader.providers.registry import (
    IaasBundle,
    bundle_for,
    create_iaas,
    list_iaas,
    load_plugins,
    register_iaas,
)

__all__ = [
    "IaasBundle",
    "bundle_for",
    "create_iaas",
    "list_iaas",
    "load_plugins",
    "register_iaas",
]
