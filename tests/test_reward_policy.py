# tests/test_reward_policy.py

from __future__ import annotations

import pytest

from taskreward.rewards.policy import compute_referral_bonus


@pytest.mark.parametrize(
    ("price", "bonus"),
    [
        (1, 1),
        (9, 1),
        (10, 2),
        (19, 2),
        (20, 3),
        (50, 6),
        (99, 10),
        (1000, 101),
    ],
)
def test_referral_bonus_examples(price: int, bonus: int) -> None:
    assert compute_referral_bonus(price) == bonus


def test_prices_below_ten_always_pay_one() -> None:
    assert {compute_referral_bonus(p) for p in range(-5, 10)} == {1}


def test_prices_from_ten_pay_a_tenth_plus_one() -> None:
    for price in range(10, 500):
        assert compute_referral_bonus(price) == price // 10 + 1
