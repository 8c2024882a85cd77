"""Configuration models and helpers for Treeline."""

from __future__ import annotations


import os
from pathlib import Path
from typing import Any, Dict, Optional, cast

from omegaconf import OmegaConf
from pydantic import BaseModel, Field, validator

from treeline.analysis.visibility import ScoreConvention


class InputConfig(BaseModel):
    """Where the height map comes from."""

    grid_path: Optional[Path] = Field(
        default=None, description="Path to a text file of equal-length digit rows."
    )


class ScanConfig(BaseModel):
    """Settings that control how sightlines are evaluated."""

    convention: ScoreConvention = Field(
        default=ScoreConvention.NATURAL,
        description="Whether zero-length sightlines zero the scenic score or count as 1.",
    )
    workers: int = Field(default=1, ge=1, le=64, description="Threads used to scan rows.")


class OutputConfig(BaseModel):
    """Presentation preferences."""

    rich_table: bool = Field(default=True)
    top_cells: int = Field(default=5, ge=1, le=100)
    export_csv: Optional[Path] = Field(default=None)
    export_json: Optional[Path] = Field(default=None)
    render_png: Optional[Path] = Field(default=None)


class AppConfig(BaseModel):
    """Top-level configuration for a Treeline run."""

    input: InputConfig = Field(default_factory=InputConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @validator("output")
    def validate_output_paths(cls, value: OutputConfig) -> OutputConfig:
        """Ensure export directories exist."""
        for path in [value.export_csv, value.export_json, value.render_png]:
            if path is not None:
                path.parent.mkdir(parents=True, exist_ok=True)
        return value


def load_config(
    grid_path: Optional[Path | str] = None,
    convention: ScoreConvention | str = ScoreConvention.NATURAL,
    workers: int = 1,
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> AppConfig:
    """
    Build AppConfig from primitive CLI values, an optional YAML file and keyword overrides.

    The file is merged over the explicit arguments, then overrides are applied using dotted
    keys (e.g. ``scan.workers=4``). ``None`` overrides are ignored.
    """
    base = AppConfig(
        input=InputConfig(grid_path=grid_path),
        scan=ScanConfig(convention=convention, workers=workers),
    )

    merged: Dict[str, Any] = base.model_dump(mode="json")

    if config_path:
        file_conf = cast(Dict[str, Any], OmegaConf.to_container(OmegaConf.load(config_path), resolve=True))
        merged = _deep_merge(merged, file_conf)

    if overrides:
        for dotted_key, value in overrides.items():
            if value is None:
                continue
            _apply_override(merged, dotted_key, value)

    config = AppConfig.model_validate(merged)
    return _resolve_relative_paths(config)


def _deep_merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in extra.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            base[key] = _deep_merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def _apply_override(target: Dict[str, Any], dotted_key: str, value: Any) -> None:
    parts = dotted_key.split(".")
    current = target
    for part in parts[:-1]:
        current = current.setdefault(part, {})
    current[parts[-1]] = value


def _resolve_relative_paths(config: AppConfig) -> AppConfig:
    grid_path = config.input.grid_path
    if grid_path is None or grid_path.is_absolute() or grid_path.exists():
        return config
    data_root = Path(os.environ.get("DATA_ROOT", "data"))
    input_update = config.input.model_copy(update={"grid_path": data_root / grid_path})
    return config.model_copy(update={"input": input_update})
