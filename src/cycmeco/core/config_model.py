"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/core/config_model.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from cycmeco.core.errors import ConfigError


class DatasetOptions(BaseModel):
    """Options forwarded to the Dataset constructor. Unknown keys are rejected."""

    auto_tidy: bool = False

    model_config = {"extra": "forbid", "frozen": True}

    @classmethod
    def coerce(cls, value: "DatasetOptions | Mapping[str, Any] | None") -> "DatasetOptions":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise ConfigError(f"Dataset options must be a mapping, got {type(value).__name__}")
        try:
            return cls.model_validate(dict(value))
        except ValidationError as e:
            raise ConfigError(f"Invalid dataset options: {e}") from e


class ConversionSpec(BaseModel):
    """One conversion job, as written in a YAML file."""

    feature_table: Path
    sample_table: Optional[Path] = None
    match_table: Optional[Path] = None
    total_reads: Optional[int] = Field(default=None, ge=0)
    options: DatasetOptions = Field(default_factory=DatasetOptions)
    outputs: Path = Path("outputs")

    model_config = {"extra": "forbid"}

    @field_validator("feature_table", mode="after")
    @classmethod
    def _feature_table_suffix(cls, v: Path) -> Path:
        if v.suffix.lower() in {".xls", ".xlsx"}:
            raise ValueError("feature_table must be a delimited text file (tsv/txt/csv), not a workbook")
        return v

    @classmethod
    def load(cls, path: Path) -> "ConversionSpec":
        try:
            data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must be a YAML mapping")

        # Normalize relative paths to the config file directory
        root = Path(path).parent

        def _fix(p):
            if isinstance(p, str):
                q = Path(p).expanduser()
                return str(q if q.is_absolute() else (root / q).resolve())
            return p

        norm: Dict[str, Any] = dict(data)
        for key in ("feature_table", "sample_table", "match_table"):
            if norm.get(key) is not None:
                norm[key] = _fix(norm[key])
        norm["outputs"] = _fix(norm.get("outputs", "outputs"))
        try:
            return cls.model_validate(norm)
        except ValidationError as e:
            raise ConfigError(f"Invalid config {path}: {e}") from e
