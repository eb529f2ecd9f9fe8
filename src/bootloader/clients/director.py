from __future__ import annotations

import ssl
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import httpx
import structlog

from bootloader.clients.retry import Retrier
from bootloader.core.errors import DirectorResponseError
from bootloader.storage.models import State

logger = structlog.get_logger()

UAA_PORT = 8443


@dataclass(frozen=True)
class DirectorInfo:
    name: str
    uuid: str
    version: str


class DirectorClient:
    """HTTP client for the director API.

    Every request goes through the retrier, so only transport failures are
    retried; an unexpected status is reported once as DirectorResponseError.
    """

    def __init__(
        self,
        address: str,
        username: str,
        password: str,
        ca_cert: str = "",
        *,
        retrier: Retrier | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._address = address.rstrip("/")
        self._username = username
        self._password = password
        self._retrier = retrier or Retrier()
        self._http = http_client or httpx.Client(timeout=timeout, verify=_verify(ca_cert))

    @classmethod
    def from_state(cls, state: State, **kwargs: Any) -> DirectorClient:
        bosh = state.bosh
        return cls(
            bosh.director_address,
            bosh.director_username,
            bosh.director_password,
            bosh.director_ssl_ca,
            **kwargs,
        )

    def close(self) -> None:
        self._http.close()

    def info(self) -> DirectorInfo:
        response = self._send("GET", f"{self._address}/info")
        _expect(response, 200)
        data = response.json()
        return DirectorInfo(
            name=data.get("name", ""),
            uuid=data.get("uuid", ""),
            version=data.get("version", ""),
        )

    def update_cloud_config(self, cloud_config: bytes) -> None:
        token = self._access_token()
        response = self._send(
            "POST",
            f"{self._address}/cloud_configs",
            content=cloud_config,
            headers={"Content-Type": "text/yaml", "Authorization": f"Bearer {token}"},
        )
        _expect(response, 201)
        logger.info("cloud_config_updated", director=self._address)

    def _access_token(self) -> str:
        host = urlparse(self._address).hostname
        response = self._send(
            "POST",
            f"https://{host}:{UAA_PORT}/oauth/token",
            data={"grant_type": "client_credentials"},
            auth=(self._username, self._password),
        )
        _expect(response, 200)
        return response.json()["access_token"]

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        return self._retrier.call(self._http.request, method, url, **kwargs)


def _expect(response: httpx.Response, status_code: int) -> None:
    if response.status_code != status_code:
        logger.error(
            "director_unexpected_response",
            status=response.status_code,
            url=str(response.request.url),
        )
        raise DirectorResponseError(response.status_code, response.reason_phrase)


def _verify(ca_cert: str) -> ssl.SSLContext | bool:
    if not ca_cert:
        return True
    return ssl.create_default_context(cadata=ca_cert)
