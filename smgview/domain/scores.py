"""Score statistics models shared by the view builders."""

from pydantic import BaseModel


class ScoreDomain(BaseModel):
    """Empirical min/max of a set of scores."""

    min: float
    max: float

    @property
    def degenerate(self) -> bool:
        return self.max <= self.min


class ScoreDistribution(BaseModel):
    """Quantile summary of a set of values.

    When ``use_log`` is set all four statistics live in ``log1p`` space and values
    passed for normalization are compressed the same way.
    """

    min: float
    max: float
    p10: float
    p90: float
    use_log: bool = False
