from smgview.scoring.normalizer import (
    compute_distribution,
    compute_domain,
    normalize_by_distribution,
    normalized_to_raw_score,
    score_threshold,
)

__all__ = [
    "compute_distribution",
    "compute_domain",
    "normalize_by_distribution",
    "normalized_to_raw_score",
    "score_threshold",
]
