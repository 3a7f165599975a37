"""
YAML config loader with schema validation.

Loads an ocean configuration from a YAML file, validates it against the
JSON schema, and overlays it onto the dataclass defaults.
"""

import yaml
import json
from pathlib import Path
from typing import Optional
import jsonschema

from .data_types import (
    OceanConfig, WorldConfig, SharkConfig, ChunkConfig,
    FishConfig, FishClassConfig, ParticleConfig, SimulationConfig
)


class DataLoadError(Exception):
    """Raised when config loading or validation fails"""
    pass


RANGE_FIELDS = ('speed_range', 'size_range', 'life_range', 'gravity_range', 'flee_distance_range')


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        # Schema validation optional
        return

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")


def _ranges_to_tuples(section: dict) -> dict:
    """YAML gives [lo, hi] lists, dataclasses hold (lo, hi) tuples"""
    out = dict(section)
    for key in RANGE_FIELDS:
        if key in out:
            out[key] = tuple(float(v) for v in out[key])
    return out


def _parse_fish_class(name: str, data: dict, default: FishClassConfig) -> FishClassConfig:
    data = _ranges_to_tuples(data)
    return FishClassConfig(
        name=name,
        speed_range=data.get('speed_range', default.speed_range),
        size_range=data.get('size_range', default.size_range),
        color=data.get('color', default.color)
    )


def parse_config(data: dict) -> OceanConfig:
    """Build OceanConfig from an already-validated dict"""
    fish_data = dict(data.get('fish') or {})
    defaults = FishConfig()
    fish = FishConfig(
        slow_fraction=fish_data.get('slow_fraction', defaults.slow_fraction),
        slow=_parse_fish_class('slow', fish_data.get('slow') or {}, defaults.slow),
        fast=_parse_fish_class('fast', fish_data.get('fast') or {}, defaults.fast),
        ambush=_parse_fish_class('ambush', fish_data.get('ambush') or {}, defaults.ambush),
        flee_distance_range=tuple(fish_data.get('flee_distance_range', defaults.flee_distance_range))
    )

    try:
        return OceanConfig(
            world=WorldConfig(**(data.get('world') or {})),
            shark=SharkConfig(**(data.get('shark') or {})),
            chunks=ChunkConfig(**(data.get('chunks') or {})),
            fish=fish,
            particles=ParticleConfig(**_ranges_to_tuples(data.get('particles') or {})),
            simulation=SimulationConfig(**(data.get('simulation') or {})),
            seed=data.get('seed'),
            name=data.get('name', OceanConfig.name)
        )
    except TypeError as e:
        # Unknown keys surface as dataclass constructor errors
        raise DataLoadError(f"Invalid config field: {e}")


def load_config(file_path: Path, schema_dir: Optional[Path] = None) -> OceanConfig:
    """Load ocean configuration from YAML"""
    file_path = Path(file_path)
    data = load_yaml(file_path)

    # Validate if schema available
    if schema_dir:
        schema_path = Path(schema_dir) / "ocean.schema.json"
        validate_against_schema(data, schema_path, file_path)

    return parse_config(data)
