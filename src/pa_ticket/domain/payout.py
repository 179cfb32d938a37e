"""Payout calculator.

    points = 100 × 2^(legs − 1) × wager

Each extra leg doubles the payout; the wager scales it linearly.
"""

BASE_POINTS: int = 100


def calc_payout(leg_count: int, wager: int) -> int:
    """Points credited for a winning ticket. Pure integer arithmetic."""
    if leg_count < 1:
        raise ValueError(f"leg_count must be >= 1, got {leg_count}")
    if wager < 1:
        raise ValueError(f"wager must be >= 1, got {wager}")
    return BASE_POINTS * (1 << (leg_count - 1)) * wager
