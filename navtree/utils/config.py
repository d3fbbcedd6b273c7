"""Settings for the reorder engine and its host surfaces."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from navtree.ordering.order_model import DEFAULT_MIN_GAP, DEFAULT_ORDER_GAP

CONFIG_FILE = Path("navtree.yaml")


class ReorderSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NAVTREE_")

    order_gap: int = Field(
        DEFAULT_ORDER_GAP,
        description="Spacing between restamped order keys.",
    )
    min_gap: int = Field(
        DEFAULT_MIN_GAP,
        description="Smallest gap between neighbours before a container is compacted.",
    )
    database_path: Path = Field(
        Path("data"),
        description="Directory holding tree.db.",
    )
    log_file_prefix: str = Field(
        "navtree",
        description="Prefix for the rotating log file.",
    )

    @model_validator(mode="after")
    def _check_gaps(self) -> "ReorderSettings":
        if self.order_gap <= 0:
            raise ValueError("order_gap must be positive")
        if not 0 < self.min_gap <= self.order_gap:
            raise ValueError("min_gap must be positive and no larger than order_gap")
        return self


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must be a mapping: {path}")
    return data


def load_settings(path: Path | None = None) -> ReorderSettings:
    """Build settings from a YAML file layered over env vars and defaults.

    Keys present in the file win over environment variables.
    """
    overrides = _load_yaml(path or CONFIG_FILE)
    return ReorderSettings(**overrides)


@lru_cache(maxsize=1)
def get_settings() -> ReorderSettings:
    return load_settings()
