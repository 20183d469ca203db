"""Unit tests for signalfx_metrics.config.loader and signalfx_metrics.config.schema."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from signalfx_metrics.config.defaults import DEFAULT_SETTINGS_YAML
from signalfx_metrics.config.loader import ConfigLoader, _AUTO_SEARCH_PATHS
from signalfx_metrics.config.schema import validate_reporting_config, validate_settings
from signalfx_metrics.schema.config import ReporterSettings, SourceType
from signalfx_metrics.schema.errors import ConfigurationError


# ---------------------------------------------------------------------------
# validate_settings / validate_reporting_config
# ---------------------------------------------------------------------------

class TestValidateSettings:
    def test_valid_minimal_dict(self) -> None:
        settings = validate_settings({"api_token": "abc"})
        assert isinstance(settings, ReporterSettings)

    def test_missing_token_raises_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            validate_settings({})

    def test_configuration_error_has_cause_and_errors(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            validate_settings({"api_token": "abc", "interval_seconds": 0})
        assert exc_info.value.__cause__ is not None
        assert exc_info.value.context["errors"]

    def test_reporting_config_requires_source(self) -> None:
        with pytest.raises(ConfigurationError, match="reporting configuration"):
            validate_reporting_config({"api_token": "abc"})


# ---------------------------------------------------------------------------
# ConfigLoader.load_yaml
# ---------------------------------------------------------------------------

class TestConfigLoaderLoadYaml:
    def test_load_valid_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "signalfx.yaml"
        config_file.write_text(
            "api_token: yaml-token\nsource_type: dns\ndetail_set: [count, p99]\n",
            encoding="utf-8",
        )
        settings = ConfigLoader().load_yaml(config_file)
        assert settings.api_token == "yaml-token"
        assert settings.source_type is SourceType.DNS
        assert settings.detail_set == frozenset({"count", "p99"})

    def test_load_yaml_with_path_string(self, tmp_path: Path) -> None:
        config_file = tmp_path / "signalfx.yaml"
        config_file.write_text("api_token: str-path\n", encoding="utf-8")
        assert ConfigLoader().load_yaml(str(config_file)).api_token == "str-path"

    def test_missing_yaml_file_raises_configuration_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader().load_yaml(tmp_path / "nonexistent.yaml")

    def test_invalid_yaml_raises_configuration_error(self, tmp_path: Path) -> None:
        bad_yaml = tmp_path / "bad.yaml"
        bad_yaml.write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="parse"):
            ConfigLoader().load_yaml(bad_yaml)

    def test_non_mapping_yaml_fails_for_missing_token(self, tmp_path: Path) -> None:
        non_mapping = tmp_path / "list.yaml"
        non_mapping.write_text("- one\n- two\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="api_token"):
            ConfigLoader().load_yaml(non_mapping)

    def test_default_template_loads_after_token_edit(self, tmp_path: Path) -> None:
        config_file = tmp_path / "signalfx.yaml"
        config_file.write_text(
            DEFAULT_SETTINGS_YAML.replace("<your SignalFx ingest token>", "real"),
            encoding="utf-8",
        )
        settings = ConfigLoader().load_yaml(config_file)
        assert settings == ReporterSettings(api_token="real")


# ---------------------------------------------------------------------------
# ConfigLoader.load_json
# ---------------------------------------------------------------------------

class TestConfigLoaderLoadJson:
    def test_load_valid_json(self, tmp_path: Path) -> None:
        config_file = tmp_path / "signalfx.json"
        config_file.write_text(
            json.dumps({"api_token": "json-token", "default_dimensions": {"env": "qa"}}),
            encoding="utf-8",
        )
        settings = ConfigLoader().load_json(config_file)
        assert settings.default_dimensions == {"env": "qa"}

    def test_missing_json_file_raises_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader().load_json(Path("/nonexistent/path/file.json"))

    def test_invalid_json_raises_configuration_error(self, tmp_path: Path) -> None:
        bad_json = tmp_path / "bad.json"
        bad_json.write_text("{not valid json}", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="parse"):
            ConfigLoader().load_json(bad_json)


# ---------------------------------------------------------------------------
# ConfigLoader.load_env
# ---------------------------------------------------------------------------

class TestConfigLoaderLoadEnv:
    def test_load_env_picks_up_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SIGNALFX_API_TOKEN", "env-token")
        assert ConfigLoader().load_env().api_token == "env-token"

    def test_load_env_parses_typed_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SIGNALFX_API_TOKEN", "env-token")
        monkeypatch.setenv("SIGNALFX_INTERVAL_SECONDS", "30")
        monkeypatch.setenv("SIGNALFX_AWS_INTEGRATION", "yes")
        monkeypatch.setenv("SIGNALFX_DETAIL_SET", "count, p95,rate_1m")
        monkeypatch.setenv("SIGNALFX_DEFAULT_DIMENSIONS", '{"environment": "prod"}')
        settings = ConfigLoader().load_env()
        assert settings.interval_seconds == 30
        assert settings.aws_integration is True
        assert settings.detail_set == frozenset({"count", "p95", "rate_1m"})
        assert settings.default_dimensions == {"environment": "prod"}

    def test_unknown_env_keys_are_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SIGNALFX_API_TOKEN", "env-token")
        monkeypatch.setenv("SIGNALFX_SOMETHING_ELSE", "x")
        assert ConfigLoader().load_env().api_token == "env-token"

    def test_load_env_custom_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MYAPP_API_TOKEN", "prefix-token")
        assert ConfigLoader().load_env(prefix="MYAPP_").api_token == "prefix-token"

    def test_load_env_without_token_fails(self) -> None:
        with pytest.raises(ConfigurationError):
            ConfigLoader().load_env()


# ---------------------------------------------------------------------------
# ConfigLoader.load_auto
# ---------------------------------------------------------------------------

class TestConfigLoaderLoadAuto:
    def test_search_paths_prefer_yaml(self) -> None:
        assert _AUTO_SEARCH_PATHS[0] == "signalfx.yaml"

    def test_no_file_and_no_env_fails(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            ConfigLoader().load_auto(search_dir=tmp_path)

    def test_finds_yaml_file(self, tmp_path: Path) -> None:
        (tmp_path / "signalfx.yaml").write_text("api_token: auto-yaml\n", encoding="utf-8")
        assert ConfigLoader().load_auto(search_dir=tmp_path).api_token == "auto-yaml"

    def test_prefers_yaml_over_json(self, tmp_path: Path) -> None:
        (tmp_path / "signalfx.yaml").write_text("api_token: from-yaml\n", encoding="utf-8")
        (tmp_path / "signalfx.json").write_text(
            json.dumps({"api_token": "from-json"}), encoding="utf-8"
        )
        assert ConfigLoader().load_auto(search_dir=tmp_path).api_token == "from-yaml"

    def test_overlays_env_vars(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "signalfx.yaml").write_text(
            "api_token: file-token\ninterval_seconds: 60\n", encoding="utf-8"
        )
        monkeypatch.setenv("SIGNALFX_API_TOKEN", "env-token")
        settings = ConfigLoader().load_auto(search_dir=tmp_path)
        assert settings.api_token == "env-token"
        assert settings.interval_seconds == 60

    def test_env_dimensions_merge_with_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "signalfx.yaml").write_text(
            "api_token: t\ndefault_dimensions:\n  environment: prod\n  team: core\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("SIGNALFX_DEFAULT_DIMENSIONS", '{"team": "infra"}')
        settings = ConfigLoader().load_auto(search_dir=tmp_path)
        assert settings.default_dimensions == {"environment": "prod", "team": "infra"}

    def test_env_only(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SIGNALFX_API_TOKEN", "env-only")
        assert ConfigLoader().load_auto(search_dir=tmp_path).api_token == "env-only"

    def test_skips_bad_file_and_tries_next(self, tmp_path: Path) -> None:
        (tmp_path / "signalfx.yaml").write_text("key: [bad yaml", encoding="utf-8")
        (tmp_path / "signalfx.json").write_text(
            json.dumps({"api_token": "fallback-json"}), encoding="utf-8"
        )
        assert ConfigLoader().load_auto(search_dir=tmp_path).api_token == "fallback-json"

    def test_hidden_yaml_variant(self, tmp_path: Path) -> None:
        (tmp_path / ".signalfx.yaml").write_text("api_token: hidden\n", encoding="utf-8")
        assert ConfigLoader().load_auto(search_dir=tmp_path).api_token == "hidden"
