"""Task completion rewards with referral bonuses."""

__version__ = "1.0.0"
