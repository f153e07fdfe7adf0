"""Configuration loading and management for SDK Namecheck.

Configuration sources are merged in priority order:
    1. Defaults (defined in NamingConfig)
    2. Project config (./sdk-namecheck.toml)
    3. Explicit config file
    4. Environment variables (SDK_NAMECHECK_* prefix)
    5. CLI / call-site overrides (passed as kwargs)

Example:
    >>> config = load_config(emitter_name="@azure-tools/typespec-python", namespace="Flat")
    >>> config.language_scope
    'python'
    >>> config.flatten_namespaces
    True
"""

from __future__ import annotations

import os
import re
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigFileError, InvalidConfigError
from .graph.models import ALL_SCOPES

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "SDK_NAMECHECK_"
PROJECT_CONFIG_NAME = "sdk-namecheck.toml"

# "@azure-tools/typespec-python" -> "python", "@typespec/http-client-csharp" -> "csharp"
_EMITTER_PATTERN = re.compile(r"(?:cadl|typespec|client|server)-([^\\/-]*)")

LANGUAGE_ALIASES = {
    "net": "csharp",
    "dotnet": "csharp",
    "cs": "csharp",
    "ts": "typescript",
    "js": "javascript",
    "py": "python",
}


def parse_emitter_language(emitter_name: str) -> str:
    """Map an emitter package name to its language scope.

    Unrecognised or empty names map to ALL_SCOPES.
    """
    if not emitter_name:
        return ALL_SCOPES
    match = _EMITTER_PATTERN.search(emitter_name)
    if not match or not match.group(1):
        return ALL_SCOPES
    language = match.group(1).lower()
    return LANGUAGE_ALIASES.get(language, language)


@dataclass(frozen=True)
class NamingConfig:
    """Configuration for one resolution run.

    Attributes:
        Emission target:
            emitter_name: Emitter package being served; decides the language
                scope used for flattened checks and for severity
            namespace: Flattening directive. When set, every type is emitted
                into this one namespace and cross-namespace collisions are reported

        Severity:
            tolerant_languages: Language scopes whose emitters disambiguate
                duplicate names themselves; collisions become warnings

        Rules:
            check_members: Check property and enum member names inside a type
            report_unnamed_types: Run the generated-name advisory rule

        Output:
            verbosity: Logging verbosity level
    """

    emitter_name: str = ""
    namespace: Optional[str] = None
    tolerant_languages: tuple[str, ...] = ("csharp",)
    check_members: bool = True
    report_unnamed_types: bool = True
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        if self.namespace is not None and not self.namespace.strip():
            raise InvalidConfigError("namespace", self.namespace, "must not be blank")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet, normal or verbose")
        if isinstance(self.tolerant_languages, (list, set, frozenset)):
            object.__setattr__(self, "tolerant_languages", tuple(self.tolerant_languages))
        elif not isinstance(self.tolerant_languages, tuple):
            raise InvalidConfigError(
                "tolerant_languages", self.tolerant_languages, "expected a list of language scopes"
            )

    @property
    def language_scope(self) -> str:
        """Language scope of the configured emitter (ALL_SCOPES when none)."""
        return parse_emitter_language(self.emitter_name)

    @property
    def flatten_namespaces(self) -> bool:
        return self.namespace is not None

    @property
    def tolerates_duplicates(self) -> bool:
        """True if the emitter family downgrades duplicate names to warnings."""
        return self.language_scope in self.tolerant_languages


DEFAULT_CONFIG = NamingConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> NamingConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); None values
            are ignored so unset CLI options do not clobber file settings

    Returns:
        Validated NamingConfig instance

    Raises:
        ConfigFileError: If a config file is missing or unreadable
        InvalidConfigError: If a key is unknown or a value is invalid
    """
    merged: dict[str, Any] = {}

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigFileError(config_file, "file not found")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    merged.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(NamingConfig)}
    for key in merged:
        if key not in known:
            raise InvalidConfigError(key, merged[key], "unknown configuration key")

    return NamingConfig(**merged)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from SDK_NAMECHECK_* environment variables.

    Supported environment variables:
        SDK_NAMECHECK_EMITTER_NAME: str
        SDK_NAMECHECK_NAMESPACE: str
        SDK_NAMECHECK_TOLERANT_LANGUAGES: comma separated list
        SDK_NAMECHECK_CHECK_MEMBERS: bool (true/false/1/0)
        SDK_NAMECHECK_REPORT_UNNAMED_TYPES: bool
        SDK_NAMECHECK_VERBOSITY: quiet/normal/verbose
    """
    type_hints = get_type_hints(NamingConfig)
    result: dict[str, Any] = {}

    for f in fields(NamingConfig):
        env_key = f"{ENV_PREFIX}{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            result[f.name] = _parse_env_value(env_value, type_hints[f.name])
        except ValueError as e:
            raise InvalidConfigError(f.name, env_value, f"invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        type_hint = next(t for t in args if t is not type(None))

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if getattr(type_hint, "__origin__", None) is tuple:
        return tuple(part.strip() for part in value.split(",") if part.strip())

    return value


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load the [tool.sdk-namecheck] table, or the whole file when absent."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigFileError(path, str(e))
    except tomllib.TOMLDecodeError as e:
        raise ConfigFileError(path, f"invalid TOML: {e}")

    section = data.get("tool", {}).get("sdk-namecheck")
    table = section if isinstance(section, dict) else data
    return {key.replace("-", "_"): value for key, value in table.items()}
