"""
CLI commands that print a single value from the environment state.
"""

from __future__ import annotations

from typing import Callable

from bootloader.config import Settings, get_settings
from bootloader.core.errors import (
    DirectorNotManagedError,
    ExitCode,
    PropertyUnsetError,
    main_with_error_handling,
)
from bootloader.providers.base import OutputsReader
from bootloader.providers.registry import bundle_for
from bootloader.storage.models import State
from bootloader.storage.store import StateStore

ENV_ID_PROPERTY = "environment id"
JUMPBOX_ADDRESS_PROPERTY = "jumpbox address"
DIRECTOR_USERNAME_PROPERTY = "director username"
DIRECTOR_PASSWORD_PROPERTY = "director password"
DIRECTOR_ADDRESS_PROPERTY = "director address"
DIRECTOR_CA_CERT_PROPERTY = "director ca cert"

# command name -> property name
QUERY_COMMANDS: dict[str, str] = {
    "env-id": ENV_ID_PROPERTY,
    "jumpbox-address": JUMPBOX_ADDRESS_PROPERTY,
    "director-username": DIRECTOR_USERNAME_PROPERTY,
    "director-password": DIRECTOR_PASSWORD_PROPERTY,
    "director-address": DIRECTOR_ADDRESS_PROPERTY,
    "director-ca-cert": DIRECTOR_CA_CERT_PROPERTY,
}

# Properties that stay meaningful without a managed director.
NO_DIRECTOR_PROPERTIES = {ENV_ID_PROPERTY, DIRECTOR_ADDRESS_PROPERTY}

DIRECTOR_PORT = 25555

_READERS: dict[str, Callable[[State], str]] = {
    ENV_ID_PROPERTY: lambda state: state.env_id,
    JUMPBOX_ADDRESS_PROPERTY: lambda state: state.jumpbox.url,
    DIRECTOR_USERNAME_PROPERTY: lambda state: state.bosh.director_username,
    DIRECTOR_PASSWORD_PROPERTY: lambda state: state.bosh.director_password,
    DIRECTOR_CA_CERT_PROPERTY: lambda state: state.bosh.director_ssl_ca,
}


class StateQuery:
    """Read-only projection of one property out of the state."""

    def __init__(self, property_name: str, outputs_reader: OutputsReader | None = None) -> None:
        if property_name not in QUERY_COMMANDS.values():
            raise ValueError(f"unknown state property: {property_name}")
        self.property_name = property_name
        self._outputs_reader = outputs_reader

    def check_fast_fails(self, state: State) -> None:
        if state.no_director and self.property_name not in NO_DIRECTOR_PROPERTIES:
            raise DirectorNotManagedError()

    def execute(self, state: State) -> str:
        self.check_fast_fails(state)

        if self.property_name == DIRECTOR_ADDRESS_PROPERTY:
            value = self._director_address(state)
        else:
            value = _READERS[self.property_name](state)

        if not value:
            raise PropertyUnsetError(self.property_name)
        return value

    def _director_address(self, state: State) -> str:
        if not state.no_director:
            return state.bosh.director_address
        if self._outputs_reader is None:
            raise PropertyUnsetError(self.property_name)
        external_ip = self._outputs_reader.get_outputs(state).get("external_ip", "")
        if not external_ip:
            return ""
        return f"https://{external_ip}:{DIRECTOR_PORT}"


@main_with_error_handling()
def state_query_command(
    property_name: str,
    state_dir: str | None = None,
    settings: Settings | None = None,
) -> int:
    settings = settings or get_settings()
    state = StateStore(state_dir or settings.state_dir).load()

    outputs_reader = None
    if state.no_director and property_name == DIRECTOR_ADDRESS_PROPERTY:
        outputs_reader = bundle_for(state.iaas, settings=settings).applier

    print(StateQuery(property_name, outputs_reader).execute(state))
    return ExitCode.SUCCESS
