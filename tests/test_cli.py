"""Tests for the command line entry point and the up/destroy commands."""

import logging

import pytest
from bootloader import main as main_module
from bootloader.cli.destroy import destroy_command
from bootloader.cli.up import up_command
from bootloader.config import Settings, get_settings
from bootloader.core.errors import ExitCode
from bootloader.main import build_parser
from bootloader.providers import registry
from bootloader.providers.registry import IaasBundle, IaasRegistry
from bootloader.storage.models import State
from bootloader.storage.store import StateStore


@pytest.fixture
def settings():
    return Settings(_env_file=None, gcp_region="us-east1", gcp_project_id="some-project")


@pytest.fixture
def installed_gcp(monkeypatch, cloud_provider, applier, deployer, cloud_config):
    reg = IaasRegistry()
    reg.register(
        "gcp",
        lambda settings=None: IaasBundle(
            cloud_provider=cloud_provider,
            applier=applier,
            deployer=deployer,
            cloud_config=cloud_config,
        ),
    )
    monkeypatch.setattr(registry, "iaas_registry", reg)
    monkeypatch.setattr(registry, "entry_points", lambda group: [])
    return reg


class TestParser:
    def test_up_flags(self):
        args = build_parser().parse_args(
            ["-s", "/tmp/env", "up", "--iaas", "gcp", "--name", "some-env", "--no-director"]
        )

        assert args.command == "up"
        assert args.state_dir == "/tmp/env"
        assert args.iaas == "gcp"
        assert args.name == "some-env"
        assert args.no_director is True

    def test_query_command(self):
        assert build_parser().parse_args(["director-address"]).command == "director-address"

    def test_no_command_prints_help(self, monkeypatch):
        monkeypatch.setattr(main_module, "configure_logging", lambda level, console=False: None)

        with pytest.raises(SystemExit) as exc_info:
            main_module.main([])

        assert exc_info.value.code == 1

    def test_main_dispatches_query(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setattr(main_module, "configure_logging", lambda level, console=False: None)
        StateStore(tmp_path).save(State(env_id="some-env-id"))

        with pytest.raises(SystemExit) as exc_info:
            main_module.main(["--state-dir", str(tmp_path), "env-id"])

        assert exc_info.value.code == 0
        assert capsys.readouterr().out == "some-env-id\n"

    @pytest.mark.parametrize(
        "argv,env,expected",
        [
            (["env-id"], None, (logging.WARNING, False)),
            (["--debug", "env-id"], None, (logging.DEBUG, True)),
            (["env-id"], "true", (logging.DEBUG, True)),
        ],
    )
    def test_debug_from_flag_or_settings(self, monkeypatch, tmp_path, argv, env, expected):
        calls = []
        monkeypatch.setattr(main_module, "configure_logging", lambda level, console=False: calls.append((level, console)))
        monkeypatch.delenv("BOOTLOADER_DEBUG", raising=False)
        if env is not None:
            monkeypatch.setenv("BOOTLOADER_DEBUG", env)
        get_settings.cache_clear()
        StateStore(tmp_path).save(State(env_id="some-env-id"))

        try:
            with pytest.raises(SystemExit):
                main_module.main(["--state-dir", str(tmp_path), *argv])
        finally:
            get_settings.cache_clear()

        assert calls == [expected]


class TestUpCommand:
    def test_creates_environment(self, tmp_path, settings, installed_gcp, cloud_provider):
        code = up_command(state_dir=str(tmp_path), iaas="gcp", name="some-env", settings=settings)

        assert code == ExitCode.SUCCESS
        state = StateStore(tmp_path).load()
        assert state.env_id == "some-env"
        assert state.iaas == "gcp"
        assert state.bosh.director_name == "bosh-some-env"
        assert state.gcp.project_id == ""
        cloud_provider.zones_for.assert_called_once_with("us-east1")

    def test_missing_iaas(self, tmp_path, installed_gcp):
        code = up_command(state_dir=str(tmp_path), settings=Settings(_env_file=None))

        assert code == ExitCode.CONFIG_ERROR
        assert not (tmp_path / "bbl-state.json").exists()

    def test_no_director_on_existing_director(self, tmp_path, settings, installed_gcp, applier):
        up_command(state_dir=str(tmp_path), iaas="gcp", settings=settings)

        code = up_command(state_dir=str(tmp_path), no_director=True, settings=settings)

        assert code == ExitCode.VALIDATION_ERROR
        assert applier.apply.call_count == 1

    def test_missing_state_dir(self, tmp_path, settings, installed_gcp):
        code = up_command(state_dir=str(tmp_path / "missing"), iaas="gcp", settings=settings)

        assert code == ExitCode.STATE_ERROR


class TestDestroyCommand:
    def test_missing_state(self, tmp_path, settings):
        assert destroy_command(state_dir=str(tmp_path), no_confirm=True, settings=settings) == ExitCode.STATE_ERROR

    def test_skip_if_missing(self, tmp_path, settings):
        code = destroy_command(
            state_dir=str(tmp_path), no_confirm=True, skip_if_missing=True, settings=settings
        )

        assert code == ExitCode.SUCCESS

    def test_destroys_environment(self, tmp_path, settings, installed_gcp, applier, deployer):
        up_command(state_dir=str(tmp_path), iaas="gcp", settings=settings)

        code = destroy_command(state_dir=str(tmp_path), no_confirm=True, settings=settings)

        assert code == ExitCode.SUCCESS
        deployer.delete_director.assert_called_once()
        applier.destroy.assert_called_once()
        assert not (tmp_path / "bbl-state.json").exists()

    def test_declined_confirmation(self, tmp_path, settings, installed_gcp, applier, monkeypatch):
        up_command(state_dir=str(tmp_path), iaas="gcp", settings=settings)
        monkeypatch.setattr("bootloader.cli.destroy.confirm", lambda prompt: False)

        code = destroy_command(state_dir=str(tmp_path), settings=settings)

        assert code == ExitCode.SUCCESS
        applier.destroy.assert_not_called()
        assert (tmp_path / "bbl-state.json").exists()
