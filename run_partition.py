#!/usr/bin/env python3
"""Entry point for spectral graph partitioning runs.

Chains the pipeline stages into a single command:
graph loading/generation -> partition -> cost analysis -> result writing.

Usage:
    python run_partition.py --generate
    python run_partition.py --graph graph.npz --config config.json
    python run_partition.py --graph edges.txt --dry-run
    python run_partition.py --generate --verbose
"""

import argparse
import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from dacite import DaciteError

from spectral_partition.config import (
    DEFAULT_CONFIG,
    PartitionConfig,
    config_from_json,
    full_config_hash,
    graph_config_hash,
)
from spectral_partition.partition import Status

log = logging.getLogger(__name__)

EXIT_INVALID_INPUT = 2


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that prints stage banners with elapsed time."""
    print(f"\n=== {name} ===")
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    elapsed = time.monotonic() - t0
    print(f"... done in {elapsed:.2f}s")
    log.info("Completed: %s in %.2fs", name, elapsed)


def run_pipeline(
    config: PartitionConfig,
    graph_path: Path | None = None,
    results_dir: str = "results",
) -> tuple[Status, Path | None]:
    """Execute graph loading, partitioning, analysis and result writing.

    Args:
        config: Partition configuration.
        graph_path: Graph file (.npz or edge list). None generates a
            planted-partition graph from config.graph.
        results_dir: Base directory for results output.

    Returns:
        (status, output_dir); output_dir is None when the input was rejected.
    """
    from spectral_partition.graph import (
        count_components,
        generate_planted_partition,
        load_graph,
    )
    from spectral_partition.partition import analyze_partition, partition_with_config
    from spectral_partition.results import write_result

    pipeline_start = time.monotonic()
    planted = None

    with stage_timer("Graph"):
        if graph_path is None:
            graph, planted = generate_planted_partition(config.graph, config.seed)
        else:
            graph = load_graph(graph_path)
        log.info(
            "Graph: n=%d, edges=%d, components=%d",
            graph.n,
            graph.m,
            count_components(graph),
        )

    with stage_timer("Spectral Partition"):
        result = partition_with_config(graph, config)
        if result.status is Status.INVALID_INPUT:
            print(f"Error: {result.message}", file=sys.stderr)
            return result.status, None
        if result.status is Status.ITERATION_LIMIT:
            log.warning("Iteration limit reached: %s", result.message)

    with stage_timer("Partition Analysis"):
        analysis = analyze_partition(graph, config.n_parts, result.parts)
        analysis.raise_for_status()
        metadata = {}
        if planted is not None:
            baseline = analyze_partition(graph, config.graph.K, planted)
            metadata["graph_config_hash"] = graph_config_hash(config)
            metadata["planted_edge_cut"] = baseline.edge_cut
            metadata["planted_cost"] = baseline.cost
            log.info(
                "Planted partition: edge_cut=%.4f, cost=%.4f",
                baseline.edge_cut,
                baseline.cost,
            )

    with stage_timer("Write Result"):
        output_dir = write_result(
            config,
            graph.n,
            graph.m,
            result,
            analysis,
            metadata=metadata,
            results_dir=results_dir,
        )

    total_elapsed = time.monotonic() - pipeline_start
    print(f"\n{'=' * 60}")
    print(f"Partition complete in {total_elapsed:.2f}s")
    print(f"  Status:      {result.status.name}")
    print(f"  Edge cut:    {analysis.edge_cut:.6g}")
    print(f"  Cost:        {analysis.cost:.6g}")
    print(f"  Sizes:       {analysis.sizes.tolist()}")
    print(f"  Eigenvalues: {[round(float(v), 6) for v in result.eig_vals]}")
    print(f"  Iterations:  lanczos={result.iters_lanczos}, "
          f"kmeans={result.iters_kmeans}")
    print(f"  Output:      {output_dir}")
    print(f"{'=' * 60}")

    return result.status, output_dir


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Partition a weighted undirected graph with spectral methods"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--graph",
        type=str,
        help="Path to a graph (.npz adjacency or 'u v [w]' edge list)",
    )
    source.add_argument(
        "--generate",
        action="store_true",
        help="Generate a planted-partition graph from the config",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to partition config JSON file (defaults if omitted)",
    )
    parser.add_argument(
        "--results-dir",
        type=str,
        default="results",
        help="Base directory for results output",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the run plan without partitioning",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.config is None:
        config = DEFAULT_CONFIG
    else:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        try:
            config = config_from_json(config_path.read_text())
        except (ValueError, DaciteError) as e:
            print(f"Error: invalid config: {e}", file=sys.stderr)
            sys.exit(EXIT_INVALID_INPUT)

    graph_path = Path(args.graph) if args.graph else None
    if graph_path is not None and not graph_path.exists():
        print(f"Error: graph file not found: {graph_path}", file=sys.stderr)
        sys.exit(1)

    print(f"Config hash: {full_config_hash(config)}")
    print(f"Partition:   n_parts={config.n_parts}, n_eig_vecs={config.n_eig_vecs}, "
          f"laplacian={config.laplacian}")
    print(f"Lanczos:     max_iter={config.lanczos.max_iter}, "
          f"restart_iter={config.lanczos.restart_iter}, tol={config.lanczos.tol}")
    print(f"k-means:     max_iter={config.kmeans.max_iter}, tol={config.kmeans.tol}")
    print(f"Seed:        {config.seed}")

    if args.dry_run:
        print("\nRun plan:")
        if graph_path is None:
            print(f"  1. Generate planted partition: n={config.graph.n}, "
                  f"K={config.graph.K}, p_in={config.graph.p_in}, "
                  f"p_out={config.graph.p_out}")
        else:
            print(f"  1. Load graph: {graph_path}")
        print(f"  2. Lanczos: {config.n_eig_vecs} smallest Laplacian eigenpairs")
        print(f"  3. k-means: {config.n_parts} clusters on the spectral embedding")
        print("  4. Analysis: edge cut and ratio-cut cost")
        print(f"  5. Write: {args.results_dir}/<run_id>/result.json, partition.npz")
        print("\n[dry-run] Config loaded successfully. Exiting.")
        return

    try:
        status, _ = run_pipeline(config, graph_path, results_dir=args.results_dir)
    except Exception:
        log.exception("Partition run failed")
        sys.exit(1)

    if status is Status.INVALID_INPUT:
        sys.exit(EXIT_INVALID_INPUT)


if __name__ == "__main__":
    main()
