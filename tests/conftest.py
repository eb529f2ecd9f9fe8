"""Root test configuration."""

import logging
from unittest.mock import MagicMock

import pytest
import structlog
from bootloader.storage.models import BOSH, GCP, Jumpbox, State


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


class RecordingStateStore:
    """In-memory store recording every saved state.

    ``errors`` lines up with save calls: ``None`` succeeds, an exception is
    raised for that call (after the state was recorded).
    """

    def __init__(self, errors=None):
        self.saved = []
        self._errors = list(errors or [])

    def save(self, state):
        self.saved.append(state.model_copy(deep=True))
        if self._errors:
            error = self._errors.pop(0)
            if error is not None:
                raise error
        return state


@pytest.fixture
def recording_store():
    return RecordingStateStore()


@pytest.fixture
def env_id_resolver():
    resolver = MagicMock()
    resolver.sync.side_effect = lambda state, name="": state.model_copy(
        update={"env_id": state.env_id or name or "some-env-id"}
    )
    return resolver


@pytest.fixture
def cloud_provider():
    provider = MagicMock()
    provider.zones_for.return_value = ["z1", "z2"]
    provider.name_exists.return_value = False
    return provider


@pytest.fixture
def applier():
    applier = MagicMock()
    applier.apply.side_effect = lambda state: state.model_copy(update={"tf_state": "tf1"})
    applier.get_outputs.return_value = {"external_ip": "203.0.113.10", "network_name": "net"}
    applier.destroy.side_effect = lambda state: state.model_copy(update={"tf_state": ""})
    return applier


def _create_director(state, outputs):
    bosh = state.bosh.model_copy(
        update={
            "director_name": f"bosh-{state.env_id}",
            "director_username": "admin",
            "director_password": "some-admin-password",
            "director_address": "https://10.0.0.6:25555",
            "director_ssl_ca": "some-ca",
            "state": {"new-key": "new-value"},
        }
    )
    return state.model_copy(update={"bosh": bosh})


@pytest.fixture
def deployer():
    deployer = MagicMock()
    deployer.create_jumpbox.side_effect = lambda state, outputs: state.model_copy(
        update={"jumpbox": Jumpbox(enabled=True, url="10.0.0.5:22", state={"jumpbox": "state"})}
    )
    deployer.create_director.side_effect = _create_director
    deployer.delete_director.side_effect = lambda state: state.model_copy(update={"bosh": BOSH()})
    deployer.delete_jumpbox.side_effect = lambda state: state.model_copy(update={"jumpbox": Jumpbox()})
    return deployer


@pytest.fixture
def cloud_config():
    return MagicMock()


@pytest.fixture
def gcp_state():
    return State(iaas="gcp", gcp=GCP(region="some-region"))
