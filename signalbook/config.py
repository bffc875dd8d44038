"""Workspace configuration and YAML loading helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .core.exceptions import InvalidInput
from .core.numbers import is_number


DEFAULT_SAMPLE_RATE = 44100.0


@dataclass(frozen=True)
class WorkspaceConfig:
    """
    Settings shared by every statement a Workspace executes.

    default_sample_rate: rate used by ``sine``/``square``/``chirp`` when the
        caller does not pass one.
    comment_marker: token that starts a whole-line or inline comment.
    preview_samples: how many leading samples a Signal prints.
    max_sifts: cap on EMD sifting iterations per mode.
    """

    default_sample_rate: float = DEFAULT_SAMPLE_RATE
    comment_marker: str = "//"
    preview_samples: int = 5
    max_sifts: int = 100

    def __post_init__(self) -> None:
        rate = self.default_sample_rate
        if not is_number(rate) or not math.isfinite(rate) or rate <= 0:
            raise InvalidInput(f"default_sample_rate must be > 0, got {rate!r}")
        object.__setattr__(self, "default_sample_rate", float(rate))
        if not isinstance(self.comment_marker, str) or not self.comment_marker.strip():
            raise InvalidInput("comment_marker must be a non-empty string")
        if not isinstance(self.preview_samples, int) or self.preview_samples < 0:
            raise InvalidInput(f"preview_samples must be an integer >= 0, got {self.preview_samples!r}")
        if not isinstance(self.max_sifts, int) or self.max_sifts < 1:
            raise InvalidInput(f"max_sifts must be an integer >= 1, got {self.max_sifts!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "WorkspaceConfig":
        """Build a config from a mapping; missing keys keep their defaults."""
        if not data:
            return cls()
        kwargs: Dict[str, Any] = {}
        if "default_sample_rate" in data:
            kwargs["default_sample_rate"] = data["default_sample_rate"]
        if "comment_marker" in data:
            kwargs["comment_marker"] = data["comment_marker"]
        if "preview_samples" in data:
            kwargs["preview_samples"] = data["preview_samples"]
        if "max_sifts" in data:
            kwargs["max_sifts"] = data["max_sifts"]
        return cls(**kwargs)

    def to_mapping(self) -> Dict[str, Any]:
        return {
            "default_sample_rate": self.default_sample_rate,
            "comment_marker": self.comment_marker,
            "preview_samples": self.preview_samples,
            "max_sifts": self.max_sifts,
        }


def load_workspace_config(path: Path | str) -> WorkspaceConfig:
    """Load a ``workspace.yaml`` file; a missing or empty file yields defaults."""

    path = Path(path)
    if not path.exists():
        return WorkspaceConfig()

    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    if raw is None:
        return WorkspaceConfig()
    if not isinstance(raw, dict):
        raise InvalidInput(f"{path}: expected a mapping at the top level")

    # allow the settings to live under a ``workspace:`` block
    section = raw.get("workspace", raw)
    if not isinstance(section, dict):
        raise InvalidInput(f"{path}: 'workspace' must be a mapping")
    return WorkspaceConfig.from_mapping(section)


def save_workspace_config(path: Path | str, config: WorkspaceConfig) -> None:
    """Persist ``config`` as YAML under a ``workspace:`` block."""

    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(
            {"workspace": config.to_mapping()},
            fh,
            default_flow_style=False,
            sort_keys=False,
        )
