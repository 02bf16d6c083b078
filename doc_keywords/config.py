"""
Configuration module for Documentation Keyword Tools.

Loads the global and project TOML configuration files, validates each tier
against the configuration schema and deep-merges them:

    built-in defaults < global config < project config < runtime overrides
"""

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError


GLOBAL_CONFIG_HOME_ENV = "DOC_KEYWORDS_HOME"
DEFAULT_GLOBAL_HOME = Path("~/.doc")
CONFIG_FILENAME = "config.toml"
PROJECT_CONFIG_PATH = Path("doc-tools") / CONFIG_FILENAME
PROJECT_MARKERS = (".git", str(PROJECT_CONFIG_PATH))


class ConfigError(ValueError):
    """Raised when a configuration file cannot be parsed or fails the schema."""


class ValidationSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    strict: bool = False
    require_taxonomy: bool = False


class CrossRefSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enable_adr: bool = True
    enable_req: bool = True
    enable_runnote: bool = True


class DocConfig(BaseModel):
    """Configuration schema shared by every tier."""

    model_config = ConfigDict(extra="forbid")

    path: str = "doc"
    taxonomy: str = "doc-tools/keyword-taxonomy.md"
    template_dir: str = "template"
    excluded_patterns: List[str] = ["README", "CHANGELOG", "LICENSE"]
    validation: ValidationSettings = ValidationSettings()
    cross_refs: CrossRefSettings = CrossRefSettings()


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two config mappings.

    Nested mappings merge key-wise; any other value in ``override`` (lists
    included) replaces the value in ``base`` wholesale.

    Args:
        base: Less specific tier
        override: More specific tier

    Returns:
        New merged mapping; neither argument is modified
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_tier(data: Dict[str, Any], source: str) -> Dict[str, Any]:
    """Validate one tier against the schema.

    Args:
        data: Raw mapping loaded for the tier
        source: Human-readable origin used in error messages

    Returns:
        Only the fields the tier explicitly sets

    Raises:
        ConfigError: If the tier violates the schema
    """
    try:
        tier = DocConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}: {e}") from e
    return tier.model_dump(exclude_unset=True)


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a TOML config file.

    Args:
        path: Path to config file

    Returns:
        Parsed mapping, or an empty mapping if the file does not exist

    Raises:
        ConfigError: If the file exists but cannot be read or parsed
    """
    path = Path(path)
    if not path.is_file():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot load config file {path}: {e}") from e


def get_config_value(config: DocConfig, key: str, default: Any = None) -> Any:
    """Look up a dotted key (e.g. ``validation.strict``) in a config."""
    value: Any = config
    for part in key.split("."):
        if isinstance(value, BaseModel):
            value = getattr(value, part, None)
        elif isinstance(value, dict):
            value = value.get(part)
        else:
            return default
        if value is None:
            return default
    return value


class ConfigResolver:
    """Resolves the three-tier configuration for a project root."""

    def __init__(
        self,
        global_config_path: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        """Initialize resolver.

        Args:
            global_config_path: Global config file (default: ~/.doc/config.toml,
                or $DOC_KEYWORDS_HOME/config.toml)
            overrides: Runtime overrides, highest precedence
        """
        if global_config_path is None:
            home = os.environ.get(GLOBAL_CONFIG_HOME_ENV)
            home_path = Path(home) if home else DEFAULT_GLOBAL_HOME
            global_config_path = home_path.expanduser() / CONFIG_FILENAME
        self.global_config_path = Path(global_config_path)
        self.overrides = overrides or {}

    @staticmethod
    def find_project_root(start: Optional[Union[str, Path]] = None) -> Path:
        """Find the project root upward from ``start``.

        The first directory containing a version-control root or the project
        config file wins. Falls back to ``start`` itself.
        """
        start = Path(start or Path.cwd()).resolve()
        for directory in (start, *start.parents):
            if any((directory / marker).exists() for marker in PROJECT_MARKERS):
                return directory
        return start

    def load(self, project_root: Union[str, Path]) -> DocConfig:
        """Load and merge all tiers for ``project_root``.

        Raises:
            ConfigError: If any tier is unparseable or violates the schema
        """
        project_config_path = Path(project_root) / PROJECT_CONFIG_PATH

        merged: Dict[str, Any] = {}
        tiers = [
            (load_config_file(self.global_config_path), str(self.global_config_path)),
            (load_config_file(project_config_path), str(project_config_path)),
            (self.overrides, "runtime overrides"),
        ]
        for data, source in tiers:
            merged = deep_merge(merged, validate_tier(data, source))

        return DocConfig.model_validate(merged)

    @staticmethod
    def resolve_path(project_root: Union[str, Path], value: str) -> Path:
        path = Path(value).expanduser()
        if path.is_absolute():
            return path
        return Path(project_root).resolve() / path

    def resolve_doc_path(self, config: DocConfig, project_root: Union[str, Path]) -> Path:
        return self.resolve_path(project_root, config.path)

    def resolve_taxonomy_path(self, config: DocConfig, project_root: Union[str, Path]) -> Path:
        return self.resolve_path(project_root, config.taxonomy)

    def resolve_template_dir(self, config: DocConfig, project_root: Union[str, Path]) -> Path:
        return self.resolve_path(project_root, config.template_dir)

    def get_config_value(self, config: DocConfig, key: str, default: Any = None) -> Any:
        return get_config_value(config, key, default)
