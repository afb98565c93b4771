from __future__ import annotations

import pytest

from rams_builder.scoring import MAX_SCORE, RiskReview, classify


class TestClassify:
    @pytest.mark.parametrize(
        ("score", "expected"),
        [
            (0, RiskReview.VERY_LOW),
            (3, RiskReview.VERY_LOW),
            (4, RiskReview.LOW),
            (6, RiskReview.LOW),
            (7, RiskReview.MEDIUM),
            (12, RiskReview.MEDIUM),
            (13, RiskReview.HIGH),
            (19, RiskReview.HIGH),
            (20, RiskReview.VERY_HIGH),
            (25, RiskReview.VERY_HIGH),
        ],
    )
    def test_band_boundaries(self, score: int, expected: RiskReview) -> None:
        assert classify(score) is expected

    def test_scores_above_matrix_are_very_high(self) -> None:
        assert classify(MAX_SCORE + 100) is RiskReview.VERY_HIGH

    def test_monotonic_over_matrix(self) -> None:
        order = list(RiskReview)
        ranks = [order.index(classify(score)) for score in range(0, MAX_SCORE + 1)]
        assert ranks == sorted(ranks)

    def test_every_product_has_exactly_one_band(self) -> None:
        for likelihood in range(1, 6):
            for severity in range(1, 6):
                assert classify(likelihood * severity) in RiskReview

    def test_negative_score_raises(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            classify(-1)


class TestRiskReview:
    def test_codes(self) -> None:
        assert [r.code for r in RiskReview] == ["<L", "L", "M", "H", "!"]

    def test_titles(self) -> None:
        assert RiskReview.VERY_LOW.title == "Very Low"
        assert RiskReview.MEDIUM.title == "Medium"
        assert RiskReview.VERY_HIGH.title == "Very High"
