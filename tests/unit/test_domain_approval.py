"""Tests for the approval rating and its colour bands."""

import pytest

from emissions_dashboard.domain.approval import ApprovalLevel, approval_level, approval_rating


class TestApprovalRating:
    def test_no_votes(self):
        assert approval_rating(0, 0) is None

    @pytest.mark.parametrize(
        "up, down, expected",
        [
            (3, 1, 75),
            (1, 1, 50),
            (0, 4, 0),
            (4, 0, 100),
            (2, 1, 67),
            (1, 2, 33),
        ],
    )
    def test_percentage(self, up, down, expected):
        assert approval_rating(up, down) == expected

    def test_half_rounds_up(self):
        # 1/8 = 12.5%
        assert approval_rating(1, 7) == 13
        # 5/8 = 62.5%
        assert approval_rating(5, 3) == 63


class TestApprovalLevel:
    @pytest.mark.parametrize(
        "rating, expected",
        [
            (None, ApprovalLevel.NO_VOTES),
            (100, ApprovalLevel.HIGH),
            (75, ApprovalLevel.HIGH),
            (74, ApprovalLevel.MEDIUM),
            (50, ApprovalLevel.MEDIUM),
            (49, ApprovalLevel.LOW),
            (0, ApprovalLevel.LOW),
        ],
    )
    def test_bands(self, rating, expected):
        assert approval_level(rating) == expected

    def test_zero_rating_is_not_no_votes(self):
        assert approval_level(approval_rating(0, 3)) == ApprovalLevel.LOW
