from __future__ import annotations

import textwrap
import pytest
from pathlib import Path

from md_structure.config import (
    ConfigLoadError,
    LintConfig,
    apply_overrides,
    build_config,
    load_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_md_structure(base: Path, body: str) -> Path:
    path = base / ".md-structure.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-structure]
        default = true
        max_line_length = 100
        max_file_size = 2048

        [tool.md-structure.rules]
        MD010 = false
        no-multiple-blanks = { maximum = 2 }
        """,
    )

    config = load_config(tmp_path)

    assert config.default is True
    assert config.max_line_length == 100
    assert config.max_file_size == 2048
    assert config.rules == {"MD010": False, "no-multiple-blanks": {"maximum": 2}}


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_md_structure(
        tmp_path,
        """
        [md-structure]
        default = false

        [md-structure.rules]
        MD047 = true
        """,
    )

    config = load_config(tmp_path)

    assert config.default is False
    assert config.rules == {"MD047": True}


def test_dotfile_accepts_tool_table(tmp_path: Path):
    _write_md_structure(
        tmp_path,
        """
        [tool.md-structure]
        max_line_length = 80
        """,
    )

    assert load_config(tmp_path).max_line_length == 80


def test_pyproject_takes_precedence_over_dotfile(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-structure]
        max_line_length = 90
        """,
    )
    _write_md_structure(
        tmp_path,
        """
        [md-structure]
        max_line_length = 70
        """,
    )

    assert load_config(tmp_path).max_line_length == 90


def test_pyproject_without_table_is_skipped(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [project]
        name = "demo"
        """,
    )
    _write_md_structure(
        tmp_path,
        """
        [md-structure]
        max_line_length = 70
        """,
    )

    assert load_config(tmp_path).max_line_length == 70


def test_walks_up_parent_directories(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-structure]
        max_line_length = 99
        """,
    )
    nested = tmp_path / "docs" / "guide"
    nested.mkdir(parents=True)

    assert load_config(nested).max_line_length == 99


def test_defaults_when_no_config(tmp_path: Path):
    assert load_config(tmp_path) == LintConfig()


def test_empty_table_yields_defaults(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-structure]
        """,
    )

    assert load_config(tmp_path) == LintConfig()


def test_invalid_toml_raises(tmp_path: Path):
    _write_pyproject(tmp_path, "[tool.md-structure\nmax_line_length = 1\n")

    with pytest.raises(ConfigLoadError, match="Cannot parse"):
        load_config(tmp_path)


def test_unknown_key_raises(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-structure]
        unknown = 1
        """,
    )

    with pytest.raises(ConfigLoadError, match="tool.md-structure"):
        load_config(tmp_path)


def test_non_table_settings_raise(tmp_path: Path):
    _write_md_structure(tmp_path, 'md-structure = "strict"\n')

    with pytest.raises(ConfigLoadError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "config",
    [
        LintConfig(max_line_length=0),
        LintConfig(max_file_size=-1),
        LintConfig(max_line_length=True),
        LintConfig(max_line_length="80"),
        LintConfig(default="yes"),
        LintConfig(rules=["MD010"]),
        LintConfig(rules={"MD999": False}),
        LintConfig(rules={"MD010": "off"}),
    ],
)
def test_validate_config_rejects_bad_values(config):
    with pytest.raises(ConfigLoadError):
        validate_config(config)


def test_validate_config_accepts_aliases_and_tables():
    validate_config(LintConfig(rules={"no-hard-tabs": False, "md012": {"maximum": 3}}))


def test_apply_overrides_ignores_none():
    config = LintConfig(max_line_length=100)
    assert apply_overrides(config, max_line_length=None, disabled_rules=[]) is config


def test_apply_overrides_folds_disabled_rules():
    config = LintConfig(rules={"MD012": {"maximum": 2}})
    updated = apply_overrides(config, max_line_length=80, disabled_rules=["MD010", "MD047"])

    assert updated.max_line_length == 80
    assert updated.rules == {"MD012": {"maximum": 2}, "MD010": False, "MD047": False}
    assert config.rules == {"MD012": {"maximum": 2}}


def test_build_config_validates_overrides(tmp_path: Path):
    with pytest.raises(ConfigLoadError, match="Unknown rule"):
        build_config(tmp_path, disabled_rules=["MD999"])


@pytest.mark.parametrize(
    ("rules", "message"),
    [
        ({"MD012": {"maximum": "two"}}, "`maximum` of rule `MD012` must be a non-negative integer"),
        ({"MD012": {"maximum": -1}}, "non-negative integer"),
        ({"MD009": {"br_spaces": True}}, "non-negative integer"),
        ({"no-trailing-punctuation": {"punctuation": 1}}, "must be a str"),
        ({"MD012": {"max": 2}}, "has no parameter `max`"),
        ({"MD010": {"strict": True}}, "has no parameter `strict`"),
    ],
)
def test_validate_config_rejects_bad_rule_parameters(rules, message):
    with pytest.raises(ConfigLoadError, match=message):
        validate_config(LintConfig(rules=rules))


def test_rule_parameters_from_pyproject_are_checked(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.md-structure.rules]
        MD012 = { maximum = "two" }
        """,
    )

    with pytest.raises(ConfigLoadError, match="`maximum`"):
        build_config(tmp_path)
