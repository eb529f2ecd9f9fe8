"""Tests for storage/store.py."""

import json
import stat

import pytest
from bootloader.core.errors import (
    ExitCode,
    IncompatibleSchemaError,
    NewerSchemaError,
    StateCorruptError,
    StateDirectoryMissingError,
)
from bootloader.storage import StateStore, load_state, save_state
from bootloader.storage.models import AWS, GCP, Azure, BOSH, State
from bootloader.storage.store import STATE_FILE_NAME, STATE_VERSION


@pytest.fixture
def store(tmp_path):
    return StateStore(tmp_path, id_factory=lambda: "some-state-id")


def write_state(directory, payload):
    (directory / STATE_FILE_NAME).write_text(json.dumps(payload))


class TestLoad:
    def test_missing_file_returns_empty_state(self, store):
        assert store.load() == State()

    def test_missing_directory(self, tmp_path):
        store = StateStore(tmp_path / "nope")

        with pytest.raises(StateDirectoryMissingError, match="nope"):
            store.load()

    def test_reads_aliased_fields(self, store, tmp_path):
        write_state(
            tmp_path,
            {
                "version": STATE_VERSION,
                "iaas": "gcp",
                "envID": "some-env-id",
                "tfState": "some-tf-state",
                "noDirector": True,
                "gcp": {"region": "some-region", "zones": ["z1"]},
            },
        )

        state = store.load()

        assert state.env_id == "some-env-id"
        assert state.tf_state == "some-tf-state"
        assert state.no_director is True
        assert state.gcp.zones == ["z1"]

    def test_empty_document_loads_as_current_version(self, store, tmp_path):
        write_state(tmp_path, {})

        assert store.load() == State(version=STATE_VERSION)

    @pytest.mark.parametrize("version", [3, 9, 10])
    def test_supported_versions(self, store, tmp_path, version):
        write_state(tmp_path, {"version": version, "envID": "some-env-id"})

        assert store.load().version == version

    def test_older_than_minimum_is_incompatible(self, store, tmp_path):
        write_state(tmp_path, {"version": 2, "envID": "some-env-id"})

        with pytest.raises(IncompatibleSchemaError) as exc_info:
            store.load()

        assert exc_info.value.version == 2
        assert "incompatible" in str(exc_info.value)

    def test_newer_than_current_is_rejected(self, store, tmp_path):
        write_state(tmp_path, {"version": 11, "envID": "some-env-id"})

        with pytest.raises(NewerSchemaError, match="schema version 11"):
            store.load()

    def test_loads_null_collections(self, store, tmp_path):
        write_state(
            tmp_path,
            {
                "version": STATE_VERSION,
                "iaas": "gcp",
                "envID": "some-env-id",
                "aws": {"zones": None},
                "gcp": {"region": "some-region", "zones": None},
                "jumpbox": {"url": "", "state": None},
                "bosh": {"directorName": "", "state": None},
                "keyPair": None,
            },
        )

        state = store.load()

        assert state.gcp.zones == []
        assert state.aws.zones == []
        assert state.jumpbox.state == {}
        assert state.bosh.state == {}
        assert state.key_pair.is_empty()
        assert state.gcp.region == "some-region"

    def test_invalid_json(self, store, tmp_path):
        (tmp_path / STATE_FILE_NAME).write_text("{not json")

        with pytest.raises(StateCorruptError, match="invalid JSON") as exc_info:
            store.load()

        assert exc_info.value.exit_code == ExitCode.STATE_ERROR
        assert "\n" not in str(exc_info.value)

    def test_invalid_field_types(self, store, tmp_path):
        write_state(tmp_path, {"version": STATE_VERSION, "gcp": {"zones": "z1"}, "bosh": {"state": []}})

        with pytest.raises(StateCorruptError) as exc_info:
            store.load()

        assert "invalid fields: gcp.zones, bosh.state" in str(exc_info.value)


class TestSave:
    def test_stamps_version_and_id(self, store):
        saved = store.save(State(env_id="some-env-id"))

        assert saved.version == STATE_VERSION
        assert saved.id == "some-state-id"
        assert store.load() == saved

    def test_keeps_existing_id(self, store):
        saved = store.save(State(env_id="some-env-id", id="existing-id"))

        assert saved.id == "existing-id"

    def test_id_stable_across_saves(self, tmp_path):
        store = StateStore(tmp_path)

        first = store.save(State(env_id="some-env-id"))
        second = store.save(first.model_copy(update={"tf_state": "tf1"}))

        assert first.id
        assert second.id == first.id

    def test_does_not_mutate_argument(self, store):
        state = State(env_id="some-env-id")

        store.save(state)

        assert state.version == 0
        assert state.id == ""

    def test_strips_secrets(self, store, tmp_path):
        state = State(
            iaas="gcp",
            env_id="some-env-id",
            gcp=GCP(service_account_key="some-key", project_id="some-project", region="r"),
            aws=AWS(access_key_id="some-access-key", secret_access_key="some-secret", region="us-east-1"),
            azure=Azure(client_secret="some-client-secret", client_id="some-client-id"),
        )

        store.save(state)
        written = json.loads((tmp_path / STATE_FILE_NAME).read_text())

        assert "serviceAccountKey" not in written["gcp"]
        assert "projectID" not in written["gcp"]
        assert "accessKeyId" not in written["aws"]
        assert "secretAccessKey" not in written["aws"]
        assert "clientSecret" not in written["azure"]
        assert written["gcp"]["region"] == "r"
        assert written["aws"]["region"] == "us-east-1"
        assert written["azure"]["clientId"] == "some-client-id"

    def test_returned_state_keeps_secrets(self, store):
        saved = store.save(State(env_id="e", gcp=GCP(service_account_key="some-key")))

        assert saved.gcp.service_account_key == "some-key"

    def test_writes_sorted_indented_json(self, store, tmp_path):
        store.save(State(env_id="some-env-id", bosh=BOSH(director_name="d")))
        content = (tmp_path / STATE_FILE_NAME).read_text()

        payload = json.loads(content)
        assert list(payload) == sorted(payload)
        assert content.startswith("{\n  ")
        assert content.endswith("\n")

    def test_file_mode(self, store, tmp_path):
        store.save(State(env_id="some-env-id"))

        mode = stat.S_IMODE((tmp_path / STATE_FILE_NAME).stat().st_mode)
        assert mode == 0o644

    def test_leaves_no_temporary_files(self, store, tmp_path):
        store.save(State(env_id="some-env-id"))
        store.save(State(env_id="some-env-id", tf_state="tf1"))

        assert [p.name for p in tmp_path.iterdir()] == [STATE_FILE_NAME]

    def test_serializer_failure_keeps_previous_file(self, tmp_path):
        StateStore(tmp_path).save(State(env_id="some-env-id"))

        def broken(payload):
            raise RuntimeError("disk full")

        with pytest.raises(RuntimeError, match="disk full"):
            StateStore(tmp_path, serializer=broken).save(State(env_id="other"))

        assert StateStore(tmp_path).load().env_id == "some-env-id"

    def test_empty_state_deletes_file(self, store, tmp_path):
        store.save(State(env_id="some-env-id"))

        result = store.save(State())

        assert result == State()
        assert not (tmp_path / STATE_FILE_NAME).exists()

    def test_empty_state_without_file(self, store, tmp_path):
        store.save(State())

        assert list(tmp_path.iterdir()) == []

    def test_missing_directory(self, tmp_path):
        with pytest.raises(StateDirectoryMissingError):
            StateStore(tmp_path / "nope").save(State(env_id="some-env-id"))


def test_module_helpers_round_trip(tmp_path):
    saved = save_state(State(iaas="aws", env_id="some-env-id"), tmp_path)

    assert load_state(tmp_path) == saved
