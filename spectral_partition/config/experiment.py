"""Partition configuration dataclasses — all frozen and slotted for immutability."""

from dataclasses import dataclass, field

LAPLACIAN_KINDS: tuple[str, ...] = ("combinatorial", "normalized")


@dataclass(frozen=True, slots=True)
class GraphConfig:
    """Planted-partition graph generation parameters."""

    n: int = 200  # number of vertices
    K: int = 4  # number of planted blocks
    p_in: float = 0.3  # in-block edge probability
    p_out: float = 0.01  # cross-block edge probability


@dataclass(frozen=True, slots=True)
class LanczosConfig:
    """Eigensolver budget, restart subspace size and convergence threshold."""

    max_iter: int = 4000  # total operator applications
    restart_iter: int = 64  # Krylov basis size before implicit restart
    tol: float = 1e-6  # residual threshold, relative to ||A||


@dataclass(frozen=True, slots=True)
class KMeansConfig:
    """Clustering iteration budget and convergence threshold."""

    max_iter: int = 200
    tol: float = 1e-8  # minimum decrease of total within-cluster cost


@dataclass(frozen=True, slots=True)
class PartitionConfig:
    """Top-level partition configuration composing all sub-configs.

    Cross-parameter validation runs in __post_init__ to reject invalid
    configurations early. Checks that depend on the graph size (such as
    n_eig_vecs < n) run in the partition entry point instead.
    """

    n_parts: int = 2
    n_eig_vecs: int = 2
    lanczos: LanczosConfig = field(default_factory=LanczosConfig)
    kmeans: KMeansConfig = field(default_factory=KMeansConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    laplacian: str = "combinatorial"
    seed: int = 42
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.n_parts < 1:
            raise ValueError(f"n_parts must be >= 1, got {self.n_parts}")
        if self.n_eig_vecs < 1:
            raise ValueError(f"n_eig_vecs must be >= 1, got {self.n_eig_vecs}")
        if self.lanczos.max_iter < 1:
            raise ValueError(
                f"lanczos.max_iter must be >= 1, got {self.lanczos.max_iter}"
            )
        if self.lanczos.restart_iter < 2:
            raise ValueError(
                f"lanczos.restart_iter must be >= 2, "
                f"got {self.lanczos.restart_iter}"
            )
        if self.lanczos.tol <= 0:
            raise ValueError(f"lanczos.tol must be > 0, got {self.lanczos.tol}")
        if self.kmeans.max_iter < 1:
            raise ValueError(
                f"kmeans.max_iter must be >= 1, got {self.kmeans.max_iter}"
            )
        if self.kmeans.tol < 0:
            raise ValueError(f"kmeans.tol must be >= 0, got {self.kmeans.tol}")
        if self.laplacian not in LAPLACIAN_KINDS:
            raise ValueError(
                f"laplacian must be one of {LAPLACIAN_KINDS}, "
                f"got {self.laplacian!r}"
            )
        if self.graph.K < 1 or self.graph.n < self.graph.K:
            raise ValueError(
                f"graph.K ({self.graph.K}) must be in [1, graph.n "
                f"({self.graph.n})]"
            )
