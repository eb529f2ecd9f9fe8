"""
Merge IaaS credentials from settings into the working state.
"""

from __future__ import annotations

from bootloader.config.settings import Settings
from bootloader.core.errors import ConfigurationError, IaasMismatchError
from bootloader.storage.models import State

SUPPORTED_IAAS = ("aws", "azure", "gcp")

_SETTINGS_FIELDS: dict[str, dict[str, str]] = {
    "aws": {
        "access_key_id": "aws_access_key_id",
        "secret_access_key": "aws_secret_access_key",
        "region": "aws_region",
    },
    "azure": {
        "subscription_id": "azure_subscription_id",
        "tenant_id": "azure_tenant_id",
        "client_id": "azure_client_id",
        "client_secret": "azure_client_secret",
        "region": "azure_region",
    },
    "gcp": {
        "service_account_key": "gcp_service_account_key",
        "project_id": "gcp_project_id",
        "region": "gcp_region",
        "zone": "gcp_zone",
    },
}


def apply_credentials(state: State, settings: Settings, iaas: str | None = None) -> State:
    """Return a copy of ``state`` carrying the configured IaaS and its credentials.

    The IaaS of an existing environment cannot change.
    """
    requested = iaas or settings.iaas
    if state.iaas and requested and requested != state.iaas:
        raise IaasMismatchError(state.iaas, requested)

    resolved = state.iaas or requested
    if not resolved:
        raise ConfigurationError("--iaas [gcp, aws, azure] must be provided or BOOTLOADER_IAAS must be set")
    if resolved not in SUPPORTED_IAAS:
        raise ConfigurationError(f"unsupported iaas: {resolved}", details={"supported": SUPPORTED_IAAS})

    block = getattr(state, resolved)
    updates = {
        field: getattr(settings, setting)
        for field, setting in _SETTINGS_FIELDS[resolved].items()
        if getattr(settings, setting)
    }
    return state.model_copy(update={"iaas": resolved, resolved: block.model_copy(update=updates)})
