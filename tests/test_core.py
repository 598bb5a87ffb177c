import os
import sys
import types
import logging
import pytest
from framework_config.sources import JsonFileSource, PyFileSource, YamlFileSource
from framework_config.validators import ConfigureHookError, SourceMissingError

FIXTURES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures")
CONFIG_DIR = os.path.join(FIXTURES_DIR, "config")
APPS_DIR = os.path.join(FIXTURES_DIR, "apps")


class TestResolution:
    """Behaviour of a configuration resolved from the fixture tree."""

    @pytest.fixture
    def config(self, make_config):
        return make_config().resolve()

    def test_loads_multiple_nested_files(self, config):
        assert config.get(["test", "value2"]) == 666

    def test_no_app_config_without_app(self, config):
        assert config.get(["app", "appLoaded"]) is None

    def test_loads_scripted_and_data_files(self, config):
        assert config.get(["test"]) is not None
        assert config.get(["jsonentry"]) is True
        assert config.get("yamlentry") is True

    def test_default_for_missing_property(self, config):
        assert config.get(["test", "value3"], 111) == 111

    def test_merges_arrays_of_two_files(self, config):
        assert config.get("test.array") == [1, 2, 3, 4]

    def test_runs_configure_hook(self, config):
        assert config.get("test.confFunc") is True

    def test_dot_notation_matches_list_path(self, config):
        assert config.get("test.value") == config.get(["test", "value"]) == 1

    def test_undefined_value(self, config):
        assert config.get("app.undefinedValue") is None

    def test_data_sources_win_over_scripted(self, config):
        assert config.get("priority.winner") == "data"
        assert config.get("priority.scripted_only") is True

    def test_malformed_file_does_not_block_siblings(self, config):
        result = config.get_load_result()
        assert os.path.join(CONFIG_DIR, "broken.json") in [e["file"] for e in result.errors]
        assert os.path.join(CONFIG_DIR, "data.json") in result.files_loaded

    def test_load_result(self, config):
        result = config.get_load_result()
        assert result.merge_order == ["scripted", "data", "data"]
        assert result.app_env is None
        assert os.path.join(CONFIG_DIR, "settings.py") in result.files_loaded
        assert os.path.join(CONFIG_DIR, "extra.yaml") in result.files_loaded

    def test_resolved_state(self, config):
        assert config.is_resolved() is True

    def test_get_all_is_a_copy(self, config):
        snapshot = config.get_all()
        snapshot["test"]["value"] = 999
        assert config.get("test.value") == 1


class TestEnvironmentOverlay:
    def test_production_only_config(self, make_config):
        config = make_config(environment="production").resolve()

        assert config.get("test.production") is True
        assert config.get("test.development") is None
        assert config.get("json-prod") is True
        assert config.get("json-dev") is None
        assert config.get("configuration.isProduction") is True
        assert not config.get("configuration.isDevelopment")

    def test_development_only_config(self, make_config):
        config = make_config(environment="development").resolve()

        assert config.get("test.production") is None
        assert config.get("test.development") is True
        assert config.get("json-prod") is None
        assert config.get("json-dev") is True
        assert config.get("configuration.isDevelopment") is True
        assert not config.get("configuration.isProduction")

    def test_environment_from_app_env(self, make_config, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        config = make_config().resolve()
        assert config.get("test.production") is True
        assert config.get_load_result().app_env == "production"

    def test_unknown_environment_only_base(self, make_config):
        config = make_config(environment="staging").resolve()
        assert config.get("test.production") is None
        assert config.get("test.development") is None
        assert config.get("test.value") == 1


class TestApplicationMode:
    def test_merges_application_config(self, make_config):
        config = make_config(app="testapp", app_base_dir=APPS_DIR).resolve()
        assert config.get("app.appLoaded") is True

    def test_app_dirs_appended(self, make_config):
        config = make_config(app="testapp", app_base_dir=APPS_DIR).resolve()
        assert config.get("system.dirs.models") == [
            "/base/models",
            os.path.normpath(os.path.join(APPS_DIR, "testapp", "models")),
        ]

    def test_app_from_argv(self, make_config):
        config = make_config(argv=["--app", "testapp", "--apppath", APPS_DIR]).resolve()

        assert config.get("app") is not None
        assert config.run_app == "testapp"
        assert config.app_base_dir == APPS_DIR

    def test_indexed_path(self, make_config):
        config = make_config(app="testapp", app_base_dir=APPS_DIR).resolve()
        assert config.get("system.dirs.models[0]") == "/base/models"
        assert config.get("system.dirs.models[1]") == os.path.normpath(os.path.join(APPS_DIR, "testapp", "models"))
        assert config.get("system.dirs.models[2]", "none") == "none"

    def test_shared_module_sections_stay_untouched(self, make_config, tmp_path, monkeypatch):
        shared = types.ModuleType("fc_shared_defaults")
        shared.SYSTEM = {"dirs": {"models": ("/base/models",), "locales": ["/base/locales"]}}
        monkeypatch.setitem(sys.modules, "fc_shared_defaults", shared)
        (tmp_path / "conf").mkdir()
        (tmp_path / "conf" / "a.py").write_text(
            "from fc_shared_defaults import SYSTEM\n"
            "\n"
            "config = {'system': SYSTEM}\n"
        )

        runs = [
            make_config(app="x", app_base_dir="/apps", custom_dirs=[str(tmp_path / "conf")]).resolve()
            for _ in range(2)
        ]

        expected = ["/base/models", os.path.normpath("/apps/x/models")]
        assert [run.get("system.dirs.models") for run in runs] == [expected, expected]
        assert shared.SYSTEM == {"dirs": {"models": ("/base/models",), "locales": ["/base/locales"]}}

    def test_explicit_app_beats_argv(self, make_config):
        config = make_config(app="other", argv=["--app", "testapp"])
        assert config.run_app == "other"


class TestLifecycle:
    def test_get_before_resolve_returns_default(self, make_config):
        config = make_config()
        assert config.is_resolved() is False
        assert config.get("test.value", "default") == "default"
        assert config.get_load_result() is None

    def test_no_sources_registered(self, make_config):
        with pytest.raises(SourceMissingError):
            make_config(sources=[]).resolve()

    def test_second_resolve_is_noop(self, make_config, caplog):
        config = make_config(app="testapp", app_base_dir=APPS_DIR).resolve()
        with caplog.at_level(logging.WARNING, logger="framework_config"):
            assert config.resolve() is config

        assert "already resolved" in caplog.text
        assert len(config.get("system.dirs.models")) == 2

    def test_reset_allows_fresh_resolution(self, make_config):
        config = make_config().resolve()
        config.reset()
        assert config.is_resolved() is False
        assert config.get("test.value") is None

        config.resolve()
        assert config.get("test.value") == 1

    def test_idempotent_across_instances(self, make_config):
        first = make_config(environment="production").resolve().get_all()
        second = make_config(environment="production").resolve().get_all()

        first["test"].pop("configure")
        second["test"].pop("configure")
        assert first == second

    def test_failing_configure_hook_aborts(self, make_config, tmp_path):
        (tmp_path / "hooks.py").write_text(
            "def _fail(section):\n"
            "    raise RuntimeError('cannot configure')\n"
            "\n"
            "config = {'broken': {'configure': _fail}}\n"
        )
        config = make_config(custom_dirs=[str(tmp_path)])

        with pytest.raises(ConfigureHookError):
            config.resolve()
        assert config.is_resolved() is False
        assert config.get("test.value", "default") == "default"
        assert config.get_all() == {}

    def test_logs_version(self, make_config, caplog):
        with caplog.at_level(logging.INFO, logger="framework_config"):
            make_config().resolve()
        assert "APP VERSION: 1.2" in caplog.text

    def test_logs_unknown_version(self, make_config, tmp_path, caplog):
        (tmp_path / "a.json").write_text('{"a": 1}')
        with caplog.at_level(logging.INFO, logger="framework_config"):
            make_config(custom_dirs=[str(tmp_path)]).resolve()
        assert "APP VERSION UNKNOWN" in caplog.text


class TestSourcePriority:
    def test_registration_order_decides(self, make_config, tmp_path):
        (tmp_path / "a.json").write_text('{"winner": "json"}')
        (tmp_path / "a.yaml").write_text("winner: yaml\n")
        (tmp_path / "a.py").write_text("config = {'winner': 'py'}\n")

        default = make_config(custom_dirs=[str(tmp_path)]).resolve()
        assert default.get("winner") == "yaml"

        reordered = make_config(
            custom_dirs=[str(tmp_path)],
            sources=[YamlFileSource(), JsonFileSource(), PyFileSource()],
        ).resolve()
        assert reordered.get("winner") == "py"

    def test_custom_dirs_win_over_config_dirs(self, make_config, tmp_path):
        base = tmp_path / "base"
        base.mkdir()
        (base / "a.json").write_text('{"value": "base", "list": ["a"]}')
        custom = tmp_path / "custom"
        custom.mkdir()
        (custom / "a.json").write_text('{"value": "custom", "list": ["b"]}')

        config = make_config(config_dirs=[str(base)], custom_dirs=[str(custom)]).resolve()
        assert config.get("value") == "custom"
        assert config.get("list") == ["a", "b"]

    def test_relative_config_dirs_use_project_root(self, make_config, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "a.json").write_text('{"fromRoot": true}')

        config = make_config(config_dirs=["config"], custom_dirs=[], project_root=str(tmp_path)).resolve()
        assert config.get("fromRoot") is True


@pytest.mark.asyncio
async def test_resolve_async_matches_sync(make_config):
    sync_config = make_config(app="testapp", app_base_dir=APPS_DIR, environment="production").resolve()
    async_config = await make_config(app="testapp", app_base_dir=APPS_DIR, environment="production").resolve_async()

    assert async_config.is_resolved() is True
    assert async_config.get("priority.winner") == "data"
    assert async_config.get("test.confFunc") is True
    assert async_config.get("system.dirs.models") == sync_config.get("system.dirs.models")
    assert async_config.get_load_result().merge_order == ["scripted", "data", "data"]


@pytest.mark.asyncio
async def test_resolve_async_without_sources(make_config):
    with pytest.raises(SourceMissingError):
        await make_config(sources=[]).resolve_async()
