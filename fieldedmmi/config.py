"""Configuration for the Fielded MMI renderer and its treecode index.

Config file is looked up in order:
  1. An explicit path passed to load_config()
  2. Path in FIELDEDMMI_CONFIG env var (if set)
  3. fieldedmmi.toml in the current working directory

If no file is found, built-in defaults are used. Only the ``[render]`` and
``[index]`` tables are read; unknown keys are rejected by the models.

Example fieldedmmi.toml::

    [render]
    max_rank = 1000
    title_fields = ["title", "TI"]

    [index]
    path = "data/mesh_treecodes.txt"
    cache_size = 5000
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

DEFAULT_MAX_RANK = 1000
DEFAULT_FIELD = "text"
TITLE_FIELDS = ("title", "TI")
CONFIG_ENV_VAR = "FIELDEDMMI_CONFIG"


class RenderConfig(BaseModel):
    """Settings for aggregation, ranking and rendering."""

    model_config = {"frozen": True, "extra": "forbid"}

    max_rank: int = Field(
        default=DEFAULT_MAX_RANK,
        gt=0,
        description="Maximum number of aggregates per document handed to the ranker.",
    )
    title_fields: tuple[str, ...] = Field(
        default=TITLE_FIELDS,
        description="Field labels that mark a mention as coming from the title.",
    )
    default_field: str = Field(
        default=DEFAULT_FIELD,
        description="Field label used when a mention carries none.",
    )
    strict: bool = Field(
        default=False,
        description="Raise InvalidMentionError instead of skipping invalid mentions.",
    )
    score_policy: Literal["last", "max", "first"] = Field(
        default="last",
        description="How an aggregate's confidence score is updated when a mention is merged.",
    )
    merge_positions: bool = Field(
        default=False,
        description="Fold tuples that differ only in position into one multi-position tuple.",
    )
    title_weight: float = Field(
        default=2.0,
        ge=1.0,
        description="Frequency multiplier FrequencyRanker applies to title concepts.",
    )


class IndexConfig(BaseModel):
    """Settings for the hierarchy index used to resolve treecodes.

    A config without a path means no index: init_resolver() then returns a
    resolver that yields no treecodes.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    path: Path | None = Field(default=None, description="Pipe-delimited treecode index file.")
    preload: bool = Field(default=True, description="Read the index when the resolver is created.")
    cache_size: int = Field(default=10000, ge=0, description="LRU cache entries in front of the index (0 = no cache).")


class FieldedMmiConfig(BaseModel):
    model_config = {"frozen": True}

    render: RenderConfig = Field(default_factory=RenderConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)


def _default_config_paths() -> list[Path]:
    """Return paths to check for fieldedmmi.toml (first existing wins)."""
    paths: list[Path] = []
    if os.environ.get(CONFIG_ENV_VAR):
        paths.append(Path(os.environ[CONFIG_ENV_VAR]))
    paths.append(Path.cwd() / "fieldedmmi.toml")
    return paths


def load_config(path: Path | str | None = None) -> FieldedMmiConfig:
    """Load configuration from TOML.

    Args:
        path: Explicit config file. When given it must exist.

    Returns:
        FieldedMmiConfig with defaults filled in for anything the file omits.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        tomllib.TOMLDecodeError: If the chosen file is not valid TOML.
        pydantic.ValidationError: If a table holds invalid or unknown keys.
    """
    if path is not None:
        candidates = [Path(path)]
        if not candidates[0].is_file():
            raise FileNotFoundError(f"Config file not found: {path}")
    else:
        candidates = _default_config_paths()

    for candidate in candidates:
        if candidate.is_file():
            with open(candidate, "rb") as f:
                data: dict[str, Any] = tomllib.load(f)
            index = dict(data.get("index") or {})
            if index.get("path"):
                # Relative index paths are taken relative to the config file.
                index_path = Path(index["path"])
                if not index_path.is_absolute():
                    index["path"] = candidate.parent / index_path
            return FieldedMmiConfig(
                render=RenderConfig(**(data.get("render") or {})),
                index=IndexConfig(**index),
            )
    return FieldedMmiConfig()
