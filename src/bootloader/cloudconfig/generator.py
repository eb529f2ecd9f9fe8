"""
Cloud config rendering.

Builds the director's cloud config from the discovered zones and the
infrastructure outputs: one availability zone per IaaS zone and one manual
subnet per availability zone.
"""

from __future__ import annotations

import ipaddress
from typing import Any

import yaml

from bootloader.storage.models import State

DEFAULT_INTERNAL_CIDR = "10.0.0.0/16"
SUBNET_PREFIX = 20
COMPILATION_WORKERS = 5

VM_TYPES = {
    "minimal": {"cpu": 1, "ram": 3840},
    "small": {"cpu": 2, "ram": 7680},
    "default": {"cpu": 2, "ram": 7680},
    "large": {"cpu": 4, "ram": 15360},
}

DISK_SIZES_GB = [1, 5, 10, 50, 100, 500, 1000]


def _az_cloud_properties(iaas: str, zone: str) -> dict[str, Any]:
    if iaas == "aws":
        return {"availability_zone": zone}
    return {"zone": zone}


def _network_cloud_properties(outputs: dict[str, Any], env_id: str) -> dict[str, Any]:
    return {
        "network_name": outputs.get("network_name", env_id),
        "subnetwork_name": outputs.get("subnetwork_name", f"{env_id}-subnet"),
        "tags": [outputs.get("internal_tag_name", f"{env_id}-internal")],
    }


def _subnets(state: State, az_names: list[str], outputs: dict[str, Any]) -> list[dict[str, Any]]:
    internal = ipaddress.ip_network(outputs.get("internal_cidr", DEFAULT_INTERNAL_CIDR))
    ranges = internal.subnets(new_prefix=SUBNET_PREFIX)
    subnets = []
    for az_name, cidr in zip(az_names, ranges):
        hosts = list(cidr.hosts())
        subnets.append(
            {
                "az": az_name,
                "range": str(cidr),
                "gateway": str(hosts[0]),
                "reserved": [f"{hosts[1]}-{hosts[4]}", str(hosts[-1])],
                "cloud_properties": _network_cloud_properties(outputs, state.env_id),
            }
        )
    return subnets


def generate_cloud_config(state: State, outputs: dict[str, Any] | None = None) -> str:
    """Render the cloud config YAML for ``state``."""
    outputs = outputs or {}
    zones = state.zones or [z for z in [state.gcp.zone] if z]
    az_names = [f"z{index}" for index in range(1, len(zones) + 1)]

    cloud_config = {
        "azs": [
            {"name": name, "cloud_properties": _az_cloud_properties(state.iaas, zone)}
            for name, zone in zip(az_names, zones)
        ],
        "compilation": {
            "workers": COMPILATION_WORKERS,
            "reuse_compilation_vms": True,
            "az": az_names[0] if az_names else "",
            "vm_type": "default",
            "network": "default",
        },
        "vm_types": [{"name": name, "cloud_properties": props} for name, props in VM_TYPES.items()],
        "disk_types": [
            {"name": f"{size}GB", "disk_size": size * 1024} for size in DISK_SIZES_GB
        ],
        "networks": [
            {"name": "default", "type": "manual", "subnets": _subnets(state, az_names, outputs)},
        ],
    }
    return yaml.safe_dump(cloud_config, sort_keys=False)
