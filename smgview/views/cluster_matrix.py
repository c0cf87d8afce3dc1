"""Cluster matrix view: edge statistics aggregated per unordered cluster pair."""

from loguru import logger

from smgview.config import settings
from smgview.domain.note import iter_related_links
from smgview.domain.scene import ClusterCell, ClusterMatrixScene
from smgview.domain.views import ClusterMatrixRequest
from smgview.graph_store.base import GraphReader
from smgview.scoring.normalizer import (
    compute_distribution,
    normalize_by_distribution,
    score_threshold,
)


def cluster_pair(cluster_a: int, cluster_b: int) -> tuple[int, int]:
    """Unordered pair key, smaller cluster id first."""
    return (cluster_a, cluster_b) if cluster_a <= cluster_b else (cluster_b, cluster_a)


def blend_intensity(count_norm: float, mean_norm: float) -> float:
    """Weighted blend of the normalized edge count and mean score."""
    gamma = settings.matrix_gamma
    return (
        settings.matrix_count_weight * count_norm**gamma
        + settings.matrix_mean_weight * mean_norm**gamma
    )


def build_cluster_matrix(store: GraphReader, request: ClusterMatrixRequest) -> ClusterMatrixScene:
    """Aggregate related (and optionally top-K long-range) edges by cluster pair.

    Edges whose endpoints lack a cluster label are skipped. A cell is hidden
    when its max score falls below the threshold taken over all pair maxima.
    Intensity blends the quantile-normalized log edge count with the
    quantile-normalized mean score.

    Args:
        store: Graph to read from
        request: Matrix parameters

    Returns:
        ClusterMatrixScene with one cell per cluster pair that has edges
    """
    indexes = store.indexes
    cluster_of = indexes.cluster_of
    stats: dict[tuple[int, int], list[float]] = {}

    def accumulate(source: int, target: int, score: float) -> None:
        if source not in cluster_of or target not in cluster_of:
            return
        key = cluster_pair(cluster_of[source], cluster_of[target])
        entry = stats.get(key)
        if entry is None:
            stats[key] = [1, score, score]
        else:
            entry[0] += 1
            entry[1] += score
            entry[2] = max(entry[2], score)

    for source_id, note in indexes.by_id.items():
        for target_id, score in iter_related_links(note):
            if target_id in indexes.by_id:
                accumulate(source_id, target_id, score)

    if request.include_long_range:
        for a, b, score in store.top_long_range_links(request.long_range_top_k):
            accumulate(a, b, score)

    cells = [
        ClusterCell(
            cluster_a=key[0],
            cluster_b=key[1],
            count=int(count),
            sum=total,
            max_score=max_score,
            mean_score=total / count,
        )
        for key, (count, total, max_score) in sorted(stats.items())
    ]

    score_values = sorted(cell.max_score for cell in cells)
    domain, threshold = score_threshold(score_values, request.min_score_normalized)
    count_distribution = compute_distribution((cell.count for cell in cells), use_log=True)
    mean_distribution = compute_distribution(cell.mean_score for cell in cells)

    for cell in cells:
        cell.hidden = cell.max_score < threshold
        cell.intensity = blend_intensity(
            normalize_by_distribution(cell.count, count_distribution),
            normalize_by_distribution(cell.mean_score, mean_distribution),
        )

    logger.debug(
        f"Cluster matrix: {len(cells)} cells over {len(indexes.cluster_counts)} clusters, "
        f"{sum(cell.hidden for cell in cells)} hidden at threshold {threshold:.4f}"
    )
    return ClusterMatrixScene(
        clusters=sorted(indexes.cluster_counts),
        cells=cells,
        score_values=score_values,
        score_domain=domain,
        threshold_raw=threshold,
    )
