from __future__ import annotations

from pathlib import Path

import pytest

from bulk_upload.config.loader import ConfigError, load_config


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.source_directory == "./data"
    assert cfg.auto_correct is False
    assert cfg.year_built_lookahead == 5
    assert cfg.matching.suggestion_threshold == 0.3
    assert cfg.matching.max_suggestions == 5
    assert cfg.matching.auto_correct_threshold == 0.8
    assert cfg.locations_file is None


def test_load_config_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "minimal.yml"
    p.write_text("source_directory: ./data\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.auto_correct is False
    assert cfg.year_built_lookahead == 5
    assert cfg.matching.auto_correct_threshold == 0.8


def test_load_config_partial_matching(temp_workdir: Path):
    p = temp_workdir / "config" / "partial.yml"
    p.write_text(
        "source_directory: ./data\nauto_correct: true\nmatching:\n  max_suggestions: 3\n",
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert cfg.auto_correct is True
    assert cfg.matching.max_suggestions == 3
    assert cfg.matching.suggestion_threshold == 0.3


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_load_config_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "bad.yml"
    p.write_text("source_directory: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


@pytest.mark.parametrize(
    "content",
    [
        "auto_correct: true\n",
        "source_directory: ./data\nunknown_key: 1\n",
        "source_directory: ./data\nauto_correct: yes please\n",
        "source_directory: ./data\nmatching:\n  auto_correct_threshold: 1.5\n",
        "source_directory: ./data\nmatching:\n  max_suggestions: 0\n",
        "- just\n- a list\n",
    ],
)
def test_load_config_validation_failed(temp_workdir: Path, content: str):
    p = temp_workdir / "config" / "invalid.yml"
    p.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(p)


def test_empty_config_file_fails_validation(temp_workdir: Path):
    p = temp_workdir / "config" / "empty.yml"
    p.write_text("", encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(p)
