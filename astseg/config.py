"""Pipeline configuration — reserved kind labels, clang arguments and output paths.

Configuration is a YAML file; every key is optional.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from astseg.ir.models import DEFAULT_VOCABULARY, KindVocabulary

CONFIG_ENV_VAR = "ASTSEG_CONFIG"
DEFAULT_CONFIG_FILE = "astseg.yaml"


class ConfigError(ValueError):
    """Configuration file is present but malformed."""


@dataclass
class OutputConfig:
    directory: Path = Path(".")
    ast_file: str = "ast_output.pb"
    ir_file: str = "ir_output.json"

    @property
    def ast_path(self) -> Path:
        return self.directory / self.ast_file

    @property
    def ir_path(self) -> Path:
        return self.directory / self.ir_file


@dataclass
class PipelineConfig:
    vocabulary: KindVocabulary = DEFAULT_VOCABULARY
    clang_args: list[str] = field(default_factory=list)
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(path: str | Path) -> PipelineConfig:
    """Load a pipeline configuration from a YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    return config_from_dict(data or {}, source=str(path))


def config_from_dict(data: dict, source: str = "<config>") -> PipelineConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: top level must be a mapping")

    kinds = _section(data, "kinds", source)
    output = _section(data, "output", source)

    vocabulary = KindVocabulary(
        branch_kinds=frozenset(
            _str_list(kinds, "branch", DEFAULT_VOCABULARY.branch_kinds, source)
        ),
        grouping_kind=_str(kinds, "grouping", DEFAULT_VOCABULARY.grouping_kind, source),
        declaration_kinds=frozenset(
            _str_list(kinds, "declarations", DEFAULT_VOCABULARY.declaration_kinds, source)
        ),
    )

    defaults = OutputConfig()
    return PipelineConfig(
        vocabulary=vocabulary,
        clang_args=_str_list(data, "clang_args", [], source),
        output=OutputConfig(
            directory=Path(_str(output, "directory", str(defaults.directory), source)),
            ast_file=_str(output, "ast_file", defaults.ast_file, source),
            ir_file=_str(output, "ir_file", defaults.ir_file, source),
        ),
    )


def resolve_config(path: str | Path | None = None) -> PipelineConfig:
    """Pick the config file: explicit path, then $ASTSEG_CONFIG, then ./astseg.yaml."""
    if path:
        return load_config(path)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return load_config(env_path)

    if Path(DEFAULT_CONFIG_FILE).is_file():
        return load_config(DEFAULT_CONFIG_FILE)

    return PipelineConfig()


def _section(data: dict, key: str, source: str) -> dict:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"{source}: '{key}' must be a mapping")
    return value


def _str(data: dict, key: str, default: str, source: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"{source}: '{key}' must be a string, got {type(value).__name__}")
    return value


def _str_list(data: dict, key: str, default, source: str) -> list[str]:
    value = data.get(key, default)
    if not isinstance(value, (list, tuple, set, frozenset)) or not all(
        isinstance(v, str) for v in value
    ):
        raise ConfigError(f"{source}: '{key}' must be a list of strings")
    return list(value)
