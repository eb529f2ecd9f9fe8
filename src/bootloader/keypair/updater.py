"""
SSH key pair creation and registration in project-wide instance metadata.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Protocol

import structlog
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_random

from bootloader.core.errors import KeyPairUpdateError
from bootloader.storage.models import KeyPair

logger = structlog.get_logger()

SSH_KEYS_METADATA_KEY = "sshKeys"
SSH_USER = "vcap"
RSA_KEY_SIZE = 2048
METADATA_WRITE_ATTEMPTS = 3


class MetadataClient(Protocol):
    """Project metadata API, shaped like the compute ``projects`` resource."""

    def get_project(self) -> dict[str, Any]:
        ...

    def set_common_instance_metadata(self, metadata: dict[str, Any]) -> None:
        ...


KeyGenerator = Callable[[], tuple[str, str]]


def generate_rsa_key_pair() -> tuple[str, str]:
    """Return (PEM private key, OpenSSH public key)."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=RSA_KEY_SIZE)
    private_key = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_key = key.public_key().public_bytes(
        encoding=serialization.Encoding.OpenSSH,
        format=serialization.PublicFormat.OpenSSH,
    ).decode()
    return private_key, public_key


class _MetadataWriteFailed(Exception):
    pass


class KeyPairUpdater:
    """Generates a key pair and appends its public half to the project's ssh keys.

    The metadata write is retried a bounded number of times with a jittered
    sleep; each attempt re-reads the project so concurrent edits are kept.
    """

    def __init__(
        self,
        client: MetadataClient,
        *,
        key_generator: KeyGenerator = generate_rsa_key_pair,
        attempts: int = METADATA_WRITE_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._key_generator = key_generator
        self._attempts = attempts
        self._sleep = sleep

    def update(self) -> KeyPair:
        try:
            private_key, public_key = self._key_generator()
        except ValueError as exc:
            raise KeyPairUpdateError(f"create key pair: {exc}") from exc

        ssh_key_entry = f"{SSH_USER}:{public_key.strip()} {SSH_USER}"
        retrying = Retrying(
            stop=stop_after_attempt(self._attempts),
            wait=wait_random(min=0.5, max=2.0),
            retry=retry_if_exception_type(_MetadataWriteFailed),
            sleep=self._sleep,
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    self._append_ssh_key(ssh_key_entry)
        except _MetadataWriteFailed as exc:
            cause = exc.__cause__
            raise KeyPairUpdateError(f"set common instance metadata: {cause}") from cause

        return KeyPair(private_key=private_key, public_key=public_key.strip())

    def _append_ssh_key(self, ssh_key_entry: str) -> None:
        try:
            project = self._client.get_project()
        except Exception as exc:
            raise KeyPairUpdateError(f"get project: {exc}") from exc

        metadata = project.setdefault("commonInstanceMetadata", {})
        items = metadata.setdefault("items", [])
        for item in items:
            if item.get("key") == SSH_KEYS_METADATA_KEY:
                keys = item.get("value", "").split("\n")
                keys.append(ssh_key_entry)
                item["value"] = "\n".join(keys)
                logger.info("ssh_keys_appended", project=project.get("name"))
                break
        else:
            logger.info("ssh_keys_created", project=project.get("name"))
            items.append({"key": SSH_KEYS_METADATA_KEY, "value": ssh_key_entry})

        try:
            self._client.set_common_instance_metadata(metadata)
        except Exception as exc:
            logger.warning("set_metadata_failed", project=project.get("name"), error=str(exc))
            raise _MetadataWriteFailed() from exc
