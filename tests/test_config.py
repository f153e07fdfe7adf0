"""Tests for configuration loading and emitter language parsing."""

import pytest

from sdk_namecheck.config import NamingConfig, load_config, parse_emitter_language
from sdk_namecheck.exceptions import ConfigFileError, InvalidConfigError


class TestParseEmitterLanguage:
    """Emitter package names map to language scopes."""

    @pytest.mark.parametrize(
        "emitter, scope",
        [
            ("@azure-tools/typespec-python", "python"),
            ("@azure-tools/typespec-java", "java"),
            ("@azure-tools/typespec-net", "csharp"),
            ("@azure-tools/typespec-csharp", "csharp"),
            ("@typespec/http-client-csharp", "csharp"),
            ("@azure-tools/typespec-ts", "typescript"),
            ("@azure-tools/cadl-go", "go"),
            ("@typespec/http-server-js", "javascript"),
        ],
    )
    def test_known_emitters(self, emitter, scope):
        assert parse_emitter_language(emitter) == scope

    @pytest.mark.parametrize("emitter", ["", "my-emitter", "@scope/openapi3"])
    def test_unrecognised_emitters(self, emitter):
        assert parse_emitter_language(emitter) == "AllScopes"


class TestNamingConfig:
    """Derived properties and validation."""

    def test_defaults(self):
        config = NamingConfig()
        assert config.language_scope == "AllScopes"
        assert not config.flatten_namespaces
        assert not config.tolerates_duplicates
        assert config.check_members
        assert config.report_unnamed_types

    def test_dotnet_tolerates_duplicates(self):
        assert NamingConfig(emitter_name="@azure-tools/typespec-net").tolerates_duplicates

    def test_flattening(self):
        assert NamingConfig(namespace="Flat").flatten_namespaces

    def test_blank_namespace(self):
        with pytest.raises(InvalidConfigError, match="namespace"):
            NamingConfig(namespace="  ")

    def test_bad_verbosity(self):
        with pytest.raises(InvalidConfigError, match="verbosity"):
            NamingConfig(verbosity="loud")

    def test_tolerant_languages_list_is_frozen(self):
        config = NamingConfig(tolerant_languages=["csharp", "go"])
        assert config.tolerant_languages == ("csharp", "go")


class TestLoadConfig:
    """Merging files, environment and call-site overrides."""

    def test_overrides_win(self):
        config = load_config(emitter_name="@azure-tools/typespec-go", namespace=None)
        assert config.language_scope == "go"
        assert config.namespace is None

    def test_verbose_and_quiet_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("SDK_NAMECHECK_NAMESPACE", "Flat")
        monkeypatch.setenv("SDK_NAMECHECK_CHECK_MEMBERS", "false")
        monkeypatch.setenv("SDK_NAMECHECK_TOLERANT_LANGUAGES", "csharp, java")
        config = load_config()
        assert config.namespace == "Flat"
        assert not config.check_members
        assert config.tolerant_languages == ("csharp", "java")

    def test_bad_environment_bool(self, monkeypatch):
        monkeypatch.setenv("SDK_NAMECHECK_REPORT_UNNAMED_TYPES", "maybe")
        with pytest.raises(InvalidConfigError, match="report_unnamed_types"):
            load_config()

    def test_project_file_is_discovered(self, tmp_path):
        (tmp_path / "sdk-namecheck.toml").write_text('emitter-name = "@azure-tools/typespec-java"\n')
        assert load_config().language_scope == "java"

    def test_tool_table_in_explicit_file(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text(
            '[project]\nname = "x"\n\n[tool.sdk-namecheck]\nnamespace = "Contoso"\n'
            "check-members = false\n"
        )
        config = load_config(config_file=path)
        assert config.namespace == "Contoso"
        assert not config.check_members

    def test_environment_beats_file(self, tmp_path, monkeypatch):
        (tmp_path / "sdk-namecheck.toml").write_text('namespace = "FromFile"\n')
        monkeypatch.setenv("SDK_NAMECHECK_NAMESPACE", "FromEnv")
        assert load_config().namespace == "FromEnv"
        assert load_config(namespace="FromCli").namespace == "FromCli"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigFileError, match="Invalid config file"):
            load_config(config_file=tmp_path / "absent.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("namespace = \n")
        with pytest.raises(ConfigFileError) as exc_info:
            load_config(config_file=path)
        assert "invalid TOML" in exc_info.value.reason

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "extra.toml"
        path.write_text("colour = \"blue\"\n")
        with pytest.raises(InvalidConfigError, match="colour"):
            load_config(config_file=path)
