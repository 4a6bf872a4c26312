"""JSON serialization and deserialization for partition configs."""

import json
from dataclasses import asdict
from typing import Any

from dacite import Config as DaciteConfig
from dacite import from_dict

from spectral_partition.config.experiment import PartitionConfig

_DACITE_CONFIG = DaciteConfig(cast=[tuple], check_types=True, strict=True)


def config_to_json(config: PartitionConfig) -> str:
    """Serialize a PartitionConfig to a JSON string (sorted keys, 2-space indent)."""
    return json.dumps(asdict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> PartitionConfig:
    """Deserialize a JSON string to a PartitionConfig.

    Uses dacite with strict=True to reject unknown keys and cast=[tuple] to
    turn JSON arrays back into tuples for tags. Missing keys fall back to
    the dataclass defaults, so partial config files are accepted.
    """
    return config_from_dict(json.loads(json_str))


def config_to_dict(config: PartitionConfig) -> dict[str, Any]:
    """Convert a PartitionConfig to a plain dictionary."""
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> PartitionConfig:
    """Reconstruct a PartitionConfig from a plain dictionary."""
    return from_dict(data_class=PartitionConfig, data=d, config=_DACITE_CONFIG)
