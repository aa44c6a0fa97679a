from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..locations.matcher import (
    DEFAULT_AUTO_CORRECT_THRESHOLD,
    DEFAULT_MAX_SUGGESTIONS,
    DEFAULT_SUGGESTION_THRESHOLD,
)
from ..validation.rules import YEAR_BUILT_LOOKAHEAD

"""Config loader.

Responsibilities:
- Load YAML config (default config/upload.yml)
- Validate against the packaged JSON schema
- Apply defaults for optional keys
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/upload.yml")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class MatchingConfig:
    suggestion_threshold: float = DEFAULT_SUGGESTION_THRESHOLD
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS
    auto_correct_threshold: float = DEFAULT_AUTO_CORRECT_THRESHOLD


@dataclass(frozen=True)
class UploadConfig:
    source_directory: str
    auto_correct: bool = False
    locations_file: str | None = None  # None -> packaged locations.yml
    year_built_lookahead: int = YEAR_BUILT_LOOKAHEAD
    matching: MatchingConfig = field(default_factory=MatchingConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing / not valid JSON, or the config data
            fails validation (missing required keys, wrong types, extra keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> UploadConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top-level value must be a mapping")

    _validate_config_schema(data)

    matching_raw = data.get("matching") or {}
    matching = MatchingConfig(
        suggestion_threshold=matching_raw.get("suggestion_threshold", DEFAULT_SUGGESTION_THRESHOLD),
        max_suggestions=matching_raw.get("max_suggestions", DEFAULT_MAX_SUGGESTIONS),
        auto_correct_threshold=matching_raw.get("auto_correct_threshold", DEFAULT_AUTO_CORRECT_THRESHOLD),
    )
    return UploadConfig(
        source_directory=data["source_directory"],
        auto_correct=data.get("auto_correct", False),
        locations_file=data.get("locations_file"),
        year_built_lookahead=data.get("year_built_lookahead", YEAR_BUILT_LOOKAHEAD),
        matching=matching,
    )
