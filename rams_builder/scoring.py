from __future__ import annotations

from enum import Enum


class RiskReview(Enum):
    VERY_LOW = "<L"
    LOW = "L"
    MEDIUM = "M"
    HIGH = "H"
    VERY_HIGH = "!"

    @property
    def code(self) -> str:
        return self.value

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES = {
    RiskReview.VERY_LOW: "Very Low",
    RiskReview.LOW: "Low",
    RiskReview.MEDIUM: "Medium",
    RiskReview.HIGH: "High",
    RiskReview.VERY_HIGH: "Very High",
}

# Upper bound (inclusive) of each band; anything above the last bound is VERY_HIGH.
_BANDS = (
    (3, RiskReview.VERY_LOW),
    (6, RiskReview.LOW),
    (12, RiskReview.MEDIUM),
    (19, RiskReview.HIGH),
)

MAX_SCORE = 25


def classify(score: int) -> RiskReview:
    """Map a likelihood x severity score to its review band."""
    if score < 0:
        raise ValueError(f"Risk score cannot be negative (got {score}).")
    for upper, review in _BANDS:
        if score <= upper:
            return review
    return RiskReview.VERY_HIGH
