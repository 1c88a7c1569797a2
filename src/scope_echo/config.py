"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from scope_echo.engine import DEFAULT_MIN_LINES, DEFAULT_OVERLAY_PREFIX, AnnotationStyle
from scope_echo.targets import TargetRegistry

CONFIG_FILE_NAME = "scope_echo.toml"
MAX_MIN_LINES_CAP = 10_000


@dataclass(slots=True, frozen=True)
class ScopeEchoConfig:
    """Fully merged annotation settings."""

    min_lines: int = DEFAULT_MIN_LINES
    overlay_prefix: str = DEFAULT_OVERLAY_PREFIX
    style: AnnotationStyle = field(default_factory=AnnotationStyle)
    dedupe_anchors: bool = True
    targets: TargetRegistry = field(default_factory=TargetRegistry.with_defaults)

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "annotations": {
                "min_lines": self.min_lines,
                "overlay_prefix": self.overlay_prefix,
                "style": self.style.name,
                "style_inherit": self.style.inherit,
                "dedupe_anchors": self.dedupe_anchors,
            },
            "targets": {
                language: list(self.targets.targets_for(language))
                for language in self.targets.languages()
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    min_lines: int | None = None
    overlay_prefix: str | None = None
    dedupe_anchors: bool | None = None


def default_config() -> ScopeEchoConfig:
    """Build the default configuration."""
    return ScopeEchoConfig()


def load_config_file(root: Path) -> dict[str, object]:
    """Load optional scope_echo.toml from a directory."""
    config_path = root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field_name: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field_name}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field_name}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_string(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"Config field '{name}' must be a string.")
    return value


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_min_lines(value: object, name: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"Config field '{name}' must be a non-negative integer.")
    if value > MAX_MIN_LINES_CAP:
        raise ValueError(f"Config field '{name}' must be <= {MAX_MIN_LINES_CAP}.")
    return value


def merge_config(
    base: ScopeEchoConfig, payload: dict[str, object], overrides: CliOverrides
) -> ScopeEchoConfig:
    """Merge defaults, file config, then CLI/startup overrides."""
    annotations_payload = _get_table(payload, "annotations")
    targets_payload = _get_table(payload, "targets")

    min_lines = _optional_min_lines(
        annotations_payload.get("min_lines"), "annotations.min_lines", base.min_lines
    )
    overlay_prefix = _optional_string(
        annotations_payload.get("overlay_prefix"),
        "annotations.overlay_prefix",
        base.overlay_prefix,
    )
    style_name = _optional_string(
        annotations_payload.get("style"), "annotations.style", base.style.name
    )
    style_inherit = base.style.inherit
    if "style_inherit" in annotations_payload:
        style_inherit = _optional_string(
            annotations_payload["style_inherit"], "annotations.style_inherit", ""
        ) or None
    dedupe_anchors = _optional_bool(
        annotations_payload.get("dedupe_anchors"),
        "annotations.dedupe_anchors",
        base.dedupe_anchors,
    )

    target_overrides = {
        language: _tuple_of_strings(kinds, "targets", language)
        for language, kinds in targets_payload.items()
    }

    merged = ScopeEchoConfig(
        min_lines=min_lines,
        overlay_prefix=overlay_prefix,
        style=AnnotationStyle(name=style_name, inherit=style_inherit),
        dedupe_anchors=dedupe_anchors,
        targets=base.targets.with_overrides(target_overrides),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ScopeEchoConfig, overrides: CliOverrides) -> ScopeEchoConfig:
    """Apply startup overrides at highest precedence."""
    return ScopeEchoConfig(
        min_lines=_optional_min_lines(overrides.min_lines, "overrides.min_lines", config.min_lines),
        overlay_prefix=_optional_string(
            overrides.overlay_prefix, "overrides.overlay_prefix", config.overlay_prefix
        ),
        style=config.style,
        dedupe_anchors=_optional_bool(
            overrides.dedupe_anchors, "overrides.dedupe_anchors", config.dedupe_anchors
        ),
        targets=config.targets,
    )


def load_effective_config(root: Path, overrides: CliOverrides | None = None) -> ScopeEchoConfig:
    """Load effective config using merge order defaults -> file config -> overrides."""
    payload = load_config_file(root.resolve())
    return merge_config(default_config(), payload, overrides or CliOverrides())
