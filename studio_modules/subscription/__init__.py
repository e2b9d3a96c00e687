"""
Subscription Module (``studio_modules.subscription``).

Account plan quotes, trials and standing using the configured fees.
"""

from studio_modules.subscription.pricing import (
    quote_subscription,
    start_trial,
    subscription_standing,
)

__all__ = ["quote_subscription", "start_trial", "subscription_standing"]
