"""Typed configuration model and merge/validation helpers for nameit."""

from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from nameit.batch import ALLOWED_FAILURE_POLICIES
from nameit.errors import ConfigError, format_user_error
from nameit.fileops import ACTIONS

_SECTIONS = ("history", "prompt", "files")


@dataclass(slots=True)
class HistoryConfig:
    """Where learned formats and values are persisted."""

    path: str | None = None


@dataclass(slots=True)
class PromptConfig:
    """Interactive chooser behavior."""

    max_choices: int = 20


@dataclass(slots=True)
class FilesConfig:
    """How rendered names are applied to files."""

    action: str = "copy"
    replace: bool = False
    destination: str | None = None
    on_failure: str = "continue"


@dataclass(slots=True)
class AppConfig:
    """Top-level typed config."""

    history: HistoryConfig
    prompt: PromptConfig
    files: FilesConfig


def default_config() -> AppConfig:
    """Build the default typed configuration."""
    return AppConfig(history=HistoryConfig(), prompt=PromptConfig(), files=FilesConfig())


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Read YAML configuration from disk."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(
            what=f"config file not found: {config_path}",
            why="--config must point to a readable YAML file",
            remediation="create the config file or drop --config to use defaults",
        )

    try:
        content = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(
            what=f"config file is not valid YAML: {config_path}",
            why=str(exc),
            remediation="fix the YAML syntax in the config file",
        ) from exc
    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise ConfigError(
            what="config content must be a mapping.",
            why="nameit requires named options under top-level sections",
            remediation="use YAML object format, for example: files: {action: move}",
        )
    return content


def merge_typed_config(*, defaults: AppConfig, yaml_config: Mapping[str, Any], cli_args: Mapping[str, Any]) -> AppConfig:
    """Merge layered typed configuration with precedence defaults < YAML < CLI."""
    _validate_top_level_sections(yaml_config=yaml_config)
    _validate_top_level_sections(yaml_config=cli_args)

    merged_dict = _deep_merge(asdict(defaults), yaml_config)
    merged_dict = _deep_merge(merged_dict, _drop_none_values(cli_args))

    merged = _dict_to_typed_config(merged_dict)
    validate_config_values(merged)
    return merged


def validate_config_values(config: AppConfig) -> None:
    """Validate enum-like and numeric constraints."""
    if config.files.action not in ACTIONS:
        options = ", ".join(sorted(ACTIONS))
        raise ValueError(
            format_user_error(
                what=f"files.action must be one of: {options}.",
                why="unsupported file action was provided",
                how_to_fix=f"choose one of {options} in YAML or use --move/--rename",
            )
        )

    if config.files.on_failure not in ALLOWED_FAILURE_POLICIES:
        options = ", ".join(sorted(ALLOWED_FAILURE_POLICIES))
        raise ValueError(
            format_user_error(
                what=f"files.on_failure must be one of: {options}.",
                why="unsupported per-file failure handling policy was provided",
                how_to_fix=f"choose one of {options} in YAML",
            )
        )

    max_choices = config.prompt.max_choices
    if isinstance(max_choices, bool) or not isinstance(max_choices, int) or max_choices <= 0:
        raise ValueError(
            format_user_error(
                what="prompt.max_choices must be a positive integer.",
                why=f"got {max_choices!r}",
                how_to_fix="set prompt.max_choices or --choices to 1 or more",
            )
        )


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge mapping values where `override` wins."""
    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _drop_none_values(values: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively remove explicit None values from override maps."""
    cleaned: dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            nested = _drop_none_values(value)
            if nested:
                cleaned[key] = nested
            continue
        cleaned[key] = value
    return cleaned


def _validate_top_level_sections(*, yaml_config: Mapping[str, Any]) -> None:
    """Ensure config contains only known top-level sections."""
    unknown_sections = [key for key in yaml_config if key not in _SECTIONS]
    if unknown_sections:
        section = unknown_sections[0]
        raise ValueError(
            format_user_error(
                what=f"unknown config section '{section}'.",
                why="configuration must map to supported sections",
                how_to_fix=f"use only: {', '.join(_SECTIONS)}",
            )
        )


def _dict_to_typed_config(raw: Mapping[str, Any]) -> AppConfig:
    """Map validated dictionary data into the typed config dataclasses."""
    return AppConfig(
        history=_build_section(HistoryConfig, "history", raw),
        prompt=_build_section(PromptConfig, "prompt", raw),
        files=_build_section(FilesConfig, "files", raw),
    )


def _build_section(section_type: type, name: str, raw: Mapping[str, Any]) -> Any:
    """Build one section dataclass, rejecting unknown keys."""
    data = raw.get(name) or {}
    if not isinstance(data, Mapping):
        raise ValueError(
            format_user_error(
                what=f"config section '{name}' must be a mapping.",
                why="section options are named keys",
                how_to_fix=f"write '{name}:' followed by indented key: value pairs",
            )
        )
    allowed = {field.name for field in fields(section_type)}
    unknown = [key for key in data if key not in allowed]
    if unknown:
        raise ValueError(
            format_user_error(
                what=f"unknown config key '{name}.{unknown[0]}'.",
                why="configuration file contains unsupported fields",
                how_to_fix=f"remove it or use one of: {', '.join(sorted(allowed))}",
            )
        )
    return section_type(**data)
