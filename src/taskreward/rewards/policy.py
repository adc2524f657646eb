"""Referral bonus policy."""

# One bonus point per full ten of task price, plus one
REFERRAL_BONUS_DIVISOR = 10
MIN_REFERRAL_BONUS = 1


def compute_referral_bonus(price: int) -> int:
    """Compute the bonus paid to a referrer when their referral completes a task.

    Args:
        price: Task price

    Returns:
        1 for prices below 10, otherwise ``price // 10 + 1``
    """
    if price < REFERRAL_BONUS_DIVISOR:
        return MIN_REFERRAL_BONUS
    return price // REFERRAL_BONUS_DIVISOR + 1
