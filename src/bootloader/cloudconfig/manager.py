from __future__ import annotations

from typing import Any, Callable

import structlog

from bootloader.clients.director import DirectorClient
from bootloader.cloudconfig.generator import generate_cloud_config
from bootloader.storage.models import State

logger = structlog.get_logger()

ClientFactory = Callable[[State], DirectorClient]


class CloudConfigManager:
    """Renders the cloud config and uploads it to the environment's director."""

    def __init__(
        self,
        client_factory: ClientFactory = DirectorClient.from_state,
        generator: Callable[[State, dict[str, Any]], str] = generate_cloud_config,
    ) -> None:
        self._client_factory = client_factory
        self._generator = generator

    def update(self, state: State, outputs: dict[str, Any]) -> None:
        cloud_config = self._generator(state, outputs)
        client = self._client_factory(state)
        logger.info("cloud_config_uploading", director=state.bosh.director_address)
        try:
            client.update_cloud_config(cloud_config.encode())
        finally:
            client.close()
