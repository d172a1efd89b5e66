"""Approval rating derived from feedback counters.

The rating is computed per dashboard cell and never stored.

Usage:
    from emissions_dashboard.domain.approval import approval_level, approval_rating

    rating = approval_rating(thumbs_up=3, thumbs_down=1)   # 75
    level = approval_level(rating)                          # ApprovalLevel.HIGH
"""

import math
from enum import Enum
from typing import Optional

HIGH_THRESHOLD = 75
MEDIUM_THRESHOLD = 50


class ApprovalLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NO_VOTES = "no_votes"


def approval_rating(thumbs_up: int, thumbs_down: int) -> Optional[int]:
    """Percentage of thumbs-up votes, rounded half up.

    Returns None when nobody has voted yet.

    Examples:
        >>> approval_rating(3, 1)
        75
        >>> approval_rating(1, 7)
        13
        >>> approval_rating(0, 0) is None
        True
    """
    total = (thumbs_up or 0) + (thumbs_down or 0)
    if total <= 0:
        return None
    # floor(x + 0.5): 12.5 → 13, where round() would give 12
    return int(math.floor((thumbs_up or 0) / total * 100 + 0.5))


def approval_level(rating: Optional[int]) -> ApprovalLevel:
    """Bucket a rating; both thresholds are inclusive."""
    if rating is None:
        return ApprovalLevel.NO_VOTES
    if rating >= HIGH_THRESHOLD:
        return ApprovalLevel.HIGH
    if rating >= MEDIUM_THRESHOLD:
        return ApprovalLevel.MEDIUM
    return ApprovalLevel.LOW
