from __future__ import annotations

from pathlib import Path

import pytest

from scope_echo.config import CliOverrides, ScopeEchoConfig, load_effective_config
from scope_echo.engine import AnnotationStyle
from scope_echo.targets import DEFAULT_TARGETS


def write_config(root: Path, *lines: str) -> None:
    (root / "scope_echo.toml").write_text("\n".join(lines), encoding="utf-8")


def test_defaults_apply_without_config_file(tmp_path: Path) -> None:
    config = load_effective_config(tmp_path)

    assert config.min_lines == 5
    assert config.overlay_prefix == "  ¤ "
    assert config.style == AnnotationStyle(name="scope-echo", inherit="comment")
    assert config.dedupe_anchors is True
    assert config.targets.targets_for("python") == DEFAULT_TARGETS["python"]


def test_file_values_override_defaults_and_extend_targets(tmp_path: Path) -> None:
    write_config(
        tmp_path,
        "[annotations]",
        "min_lines = 8",
        'overlay_prefix = " -- "',
        'style = "scope-dim"',
        'style_inherit = ""',
        "dedupe_anchors = false",
        "[targets]",
        'python = ["function_definition"]',
        'lua = ["function_declaration", "if_statement"]',
    )

    config = load_effective_config(tmp_path)

    assert config.min_lines == 8
    assert config.overlay_prefix == " -- "
    assert config.style == AnnotationStyle(name="scope-dim", inherit=None)
    assert config.dedupe_anchors is False
    assert config.targets.targets_for("python") == ("function_definition",)
    assert config.targets.targets_for("lua") == ("function_declaration", "if_statement")
    assert config.targets.targets_for("rust") == DEFAULT_TARGETS["rust"]


def test_cli_overrides_take_highest_precedence(tmp_path: Path) -> None:
    write_config(tmp_path, "[annotations]", "min_lines = 8", 'overlay_prefix = " -- "')

    config = load_effective_config(
        tmp_path, CliOverrides(min_lines=0, overlay_prefix=" :: ", dedupe_anchors=False)
    )

    assert config.min_lines == 0
    assert config.overlay_prefix == " :: "
    assert config.dedupe_anchors is False


def test_invalid_min_lines_raises_value_error(tmp_path: Path) -> None:
    write_config(tmp_path, "[annotations]", 'min_lines = "five"')

    with pytest.raises(ValueError, match="annotations.min_lines"):
        load_effective_config(tmp_path)


def test_negative_override_raises_value_error(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="overrides.min_lines"):
        load_effective_config(tmp_path, CliOverrides(min_lines=-1))


def test_invalid_section_type_raises_value_error(tmp_path: Path) -> None:
    write_config(tmp_path, 'targets = "python"')

    with pytest.raises(ValueError, match="section 'targets'"):
        load_effective_config(tmp_path)


def test_target_kinds_must_be_strings(tmp_path: Path) -> None:
    write_config(tmp_path, "[targets]", "python = [1, 2]")

    with pytest.raises(ValueError, match="targets.python"):
        load_effective_config(tmp_path)


def test_public_dict_snapshot_lists_targets() -> None:
    snapshot = ScopeEchoConfig().to_public_dict()

    assert snapshot["annotations"] == {
        "min_lines": 5,
        "overlay_prefix": "  ¤ ",
        "style": "scope-echo",
        "style_inherit": "comment",
        "dedupe_anchors": True,
    }
    assert snapshot["targets"]["json"] == ["pair"]  # type: ignore[index]
