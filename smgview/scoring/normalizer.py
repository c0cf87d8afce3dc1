"""Score statistics shared by the view builders.

Thresholds map linearly onto the observed min/max. Visual intensity is
normalized against the p10..p90 span instead, with log compression for counts.
"""

from typing import Iterable

import numpy as np

from smgview.domain.scores import ScoreDistribution, ScoreDomain

SPAN_EPSILON = 1e-9


def _finite_array(values: Iterable[float]) -> np.ndarray:
    array = np.asarray(list(values), dtype=np.float64)
    return array[np.isfinite(array)]


def compute_domain(scores: Iterable[float]) -> ScoreDomain | None:
    """Min/max of the finite scores, or None if there are none."""
    array = _finite_array(scores)
    if array.size == 0:
        return None
    return ScoreDomain(min=float(array.min()), max=float(array.max()))


def compute_distribution(values: Iterable[float], use_log: bool = False) -> ScoreDistribution | None:
    """Quantile summary using linearly interpolated rank quantiles.

    Args:
        values: Raw values; non-finite entries are ignored
        use_log: Compress values with ``log1p`` (negatives clamp to 0) first

    Returns:
        ScoreDistribution, or None if there are no finite values
    """
    array = _finite_array(values)
    if array.size == 0:
        return None
    if use_log:
        array = np.log1p(np.maximum(array, 0.0))
    p10, p90 = np.quantile(array, [0.1, 0.9])
    return ScoreDistribution(
        min=float(array.min()),
        max=float(array.max()),
        p10=float(p10),
        p90=float(p90),
        use_log=use_log,
    )


def normalize_by_distribution(value: float, distribution: ScoreDistribution | None) -> float:
    """Map a value into [0, 1] relative to a distribution.

    The p10..p90 span is used when it is wide enough, then the full min..max
    span; a distribution of one repeated value maps everything to 1.
    """
    if distribution is None:
        return 0.0
    if distribution.use_log:
        value = float(np.log1p(max(value, 0.0)))

    span = distribution.p90 - distribution.p10
    if span > SPAN_EPSILON:
        return float(np.clip((value - distribution.p10) / span, 0.0, 1.0))

    full_span = distribution.max - distribution.min
    if full_span > SPAN_EPSILON:
        return float(np.clip((value - distribution.min) / full_span, 0.0, 1.0))

    return 1.0


def normalized_to_raw_score(normalized: float, domain: ScoreDomain | None) -> float:
    """Linear inverse mapping of a [0, 1] threshold onto a score domain.

    Returns 0 for a missing or degenerate domain.
    """
    if domain is None or domain.degenerate:
        return 0.0
    normalized = min(1.0, max(0.0, normalized))
    return min(domain.max, domain.min + normalized * (domain.max - domain.min))


def score_threshold(
    scores: Iterable[float], normalized: float
) -> tuple[ScoreDomain | None, float]:
    """Domain of the observed scores and the raw cutoff for a normalized threshold."""
    domain = compute_domain(scores)
    return domain, normalized_to_raw_score(normalized, domain)
