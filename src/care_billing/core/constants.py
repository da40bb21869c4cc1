"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_SESSION_PAYMENT = Decimal("40")
PAYMENT_TERMS_DAYS = 14
MAX_NUMBER_ATTEMPTS = 100
DEFAULT_REGISTER_DAYS = 30
