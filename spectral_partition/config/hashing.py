"""Stable short hashes of partition configs, used to identify runs."""

import hashlib
import json
from dataclasses import asdict
from typing import Any, Iterable

from spectral_partition.config.experiment import PartitionConfig

HASH_LENGTH = 16


def config_hash(config: Any, exclude: Iterable[str] = ()) -> str:
    """SHA-256 of a dataclass config, serialized as canonical JSON.

    Args:
        config: A config dataclass instance (top-level or sub-config).
        exclude: Top-level field names left out of the hash.

    Returns:
        The first HASH_LENGTH hex digits of the digest.
    """
    skipped = set(exclude)
    fields = {k: v for k, v in asdict(config).items() if k not in skipped}
    payload = json.dumps(fields, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def graph_config_hash(config: PartitionConfig) -> str:
    """Hash of the planted-graph parameters alone.

    Runs that only change solver settings share it, so their generated
    graphs can be compared directly.
    """
    return config_hash(config.graph)


def full_config_hash(config: PartitionConfig) -> str:
    """Hash of everything that affects the partition; labels are ignored."""
    return config_hash(config, exclude=("description", "tags"))
