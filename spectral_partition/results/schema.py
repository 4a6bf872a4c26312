"""Run records: result.json holds config and scalar metrics, partition.npz
holds the label and eigenvector arrays. Records are validated with plain
field/type tables on write and again on load.
"""

import json
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from spectral_partition.config.experiment import PartitionConfig
from spectral_partition.config.hashing import full_config_hash
from spectral_partition.partition.analysis import PartitionAnalysis
from spectral_partition.partition.spectral import PartitionResult
from spectral_partition.partition.status import Status
from spectral_partition.results.run_id import generate_run_id

log = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"

# field -> accepted type(s); every listed field is required
TOP_FIELDS: dict[str, type | tuple[type, ...]] = {
    "schema_version": str,
    "run_id": str,
    "timestamp": str,
    "description": str,
    "tags": list,
    "config": dict,
    "graph": dict,
    "metrics": dict,
}

METRICS_FIELDS: dict[str, type | tuple[type, ...]] = {
    "status": str,
    "edge_cut": (int, float),
    "cost": (int, float),
    "iters_lanczos": int,
    "iters_kmeans": int,
    "eigenvalues": list,
    "partition_sizes": list,
}


def _check_fields(
    record: dict[str, Any],
    fields: dict[str, type | tuple[type, ...]],
    where: str,
) -> list[str]:
    errors = []
    missing = sorted(set(fields) - set(record))
    if missing:
        errors.append(f"Missing required {where} fields: {missing}")
    for name, expected in fields.items():
        value = record.get(name)
        if name in record and (
            not isinstance(value, expected) or isinstance(value, bool)
        ):
            errors.append(f"{name} has type {type(value).__name__}")
    return errors


def validate_result(result: dict[str, Any]) -> list[str]:
    """Check a run record before it is written or after it is loaded.

    Returns a list of error strings. An empty list means the result is valid.

    Beyond field presence and types this checks that the timestamp is ISO
    8601, the status names a Status member, the partition sizes cover every
    vertex, and the eigenvalues are ascending.
    """
    errors = _check_fields(result, TOP_FIELDS, "top-level")

    ts = result.get("timestamp")
    if isinstance(ts, str):
        try:
            datetime.fromisoformat(ts)
        except ValueError:
            errors.append(f"timestamp {ts!r} is not ISO 8601")

    metrics = result.get("metrics")
    if not isinstance(metrics, dict):
        return errors
    errors.extend(_check_fields(metrics, METRICS_FIELDS, "metrics"))

    status = metrics.get("status")
    if isinstance(status, str) and status not in Status.__members__:
        errors.append(
            f"metrics.status {status!r} is not one of {list(Status.__members__)}"
        )

    sizes = metrics.get("partition_sizes")
    graph = result.get("graph")
    if isinstance(sizes, list) and isinstance(graph, dict) and "n" in graph:
        if sum(sizes) != graph["n"]:
            errors.append(
                f"partition_sizes sum ({sum(sizes)}) != graph.n ({graph['n']})"
            )

    eigenvalues = metrics.get("eigenvalues")
    if isinstance(eigenvalues, list) and eigenvalues != sorted(eigenvalues):
        errors.append("metrics.eigenvalues must be in ascending order")

    return errors


def _claim_run_dir(results_dir: Path, run_id: str) -> Path:
    """Create and return a fresh run directory, suffixing run_id if taken."""
    results_dir.mkdir(parents=True, exist_ok=True)
    name, attempt = run_id, 1
    while True:
        try:
            (results_dir / name).mkdir()
            return results_dir / name
        except FileExistsError:
            attempt += 1
            name = f"{run_id}_{attempt}"


def write_result(
    config: PartitionConfig,
    n: int,
    m: int,
    result: PartitionResult,
    analysis: PartitionAnalysis,
    metadata: dict[str, Any] | None = None,
    results_dir: str | Path = "results",
) -> Path:
    """Write result.json and partition.npz for a finished run.

    Creates results_dir/{run_id}/ holding result.json (config, scalar
    metrics) and partition.npz (parts, eigenvalues, eigenvectors). The
    record is validated before anything touches the disk. A run ID that
    is already taken gets a numeric suffix (_2, _3, ...).

    Args:
        config: The partition configuration.
        n: Vertex count of the partitioned graph.
        m: Undirected edge count of the partitioned graph.
        result: Output of partition().
        analysis: Output of analyze_partition() on result.parts.
        metadata: Optional extra metadata merged into the metadata block.
        results_dir: Base directory for result output.

    Returns:
        The run directory.

    Raises:
        ValueError: If the assembled result fails validation.
    """
    run_id = generate_run_id(config, n)
    record = {
        "schema_version": SCHEMA_VERSION,
        "run_id": run_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "description": config.description,
        "tags": list(config.tags),
        "config": asdict(config),
        "graph": {"n": n, "m": m},
        "metrics": {
            "status": result.status.name,
            "message": result.message,
            "edge_cut": analysis.edge_cut,
            "cost": analysis.cost,
            "iters_lanczos": result.iters_lanczos,
            "iters_kmeans": result.iters_kmeans,
            "lanczos_converged": result.lanczos_converged,
            "kmeans_converged": result.kmeans_converged,
            "eigenvalues": result.eig_vals.tolist(),
            "partition_sizes": analysis.sizes.tolist(),
        },
        "metadata": {
            "config_hash": full_config_hash(config),
            **(metadata or {}),
        },
    }

    errors = validate_result(record)
    if errors:
        raise ValueError(
            "Result validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )

    out_dir = _claim_run_dir(Path(results_dir), run_id)
    record["run_id"] = out_dir.name

    with open(out_dir / "result.json", "w") as f:
        json.dump(record, f, indent=2)

    np.savez_compressed(
        str(out_dir / "partition.npz"),
        parts=result.parts,
        eigenvalues=result.eig_vals,
        eigenvectors=result.eig_vecs,
    )
    log.info("Result written to %s", out_dir)
    return out_dir


def load_result(result_path: str | Path) -> dict[str, Any]:
    """Load and validate a result.json file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the loaded result fails validation.
    """
    path = Path(result_path)
    with open(path) as f:
        result = json.load(f)

    errors = validate_result(result)
    if errors:
        raise ValueError(
            f"Result validation failed for {path}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )
    return result
