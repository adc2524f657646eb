"""Reward computation."""

from taskreward.rewards.policy import compute_referral_bonus

__all__ = ["compute_referral_bonus"]
