"""Domain constants for party ledgers and payment tracking."""

OFFICIAL = "OFFICIAL"
OFFLINE = "OFFLINE"

BILLING_MODES = (OFFICIAL, OFFLINE)
DEFAULT_BILLING_MODE = OFFICIAL

GROUND_FLOOR = "GROUND_FLOOR"
FIRST_FLOOR = "FIRST_FLOOR"

FLOORS = (GROUND_FLOOR, FIRST_FLOOR)

OVERDUE = "OVERDUE"
DUE_SOON = "DUE_SOON"
UPCOMING = "UPCOMING"

PAYMENT_STATUSES = (OVERDUE, DUE_SOON, UPCOMING)

DEFAULT_PAYMENT_PAGE_SIZE = 500


__all__ = [
    "OFFICIAL",
    "OFFLINE",
    "BILLING_MODES",
    "DEFAULT_BILLING_MODE",
    "GROUND_FLOOR",
    "FIRST_FLOOR",
    "FLOORS",
    "OVERDUE",
    "DUE_SOON",
    "UPCOMING",
    "PAYMENT_STATUSES",
    "DEFAULT_PAYMENT_PAGE_SIZE",
]
