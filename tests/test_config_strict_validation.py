from __future__ import annotations

from pathlib import Path

import pytest

from settings.config import ConfigError, ModChangesConfig, load_config


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "modchanges.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == ModChangesConfig()
    assert config.descriptor_filename == "pom.xml"
    assert config.command_timeout_seconds == 300


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
exclude = ["examples/*"]
command_timeout_seconds = 30
marker_format = "%ad"
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.exclude == ["examples/*"]
    assert config.command_timeout_seconds == 30
    assert config.marker_format == "%ad"


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "exclude = [")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "toml_content",
    [
        "command_timeout_seconds = 0",
        'descriptor_filename = "sub/pom.xml"',
        'descriptor_filename = "  "',
        'marker_format = "hash"',
    ],
)
def test_invalid_values_rejected(tmp_path: Path, toml_content: str) -> None:
    _write_config(tmp_path, toml_content)

    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(tmp_path)
