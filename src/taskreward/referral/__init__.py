"""Referral module.

A user can present another user's refer code once. Every task they complete
afterwards pays the referrer a bonus computed from the task price.
"""

from taskreward.referral.service import ReferralService

__all__ = ["ReferralService"]
