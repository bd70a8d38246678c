from enum import Enum


class CheckoutOutcome(str, Enum):
    CONFIRMED = "CONFIRMED"   # Order created and a courier assigned
    QUEUED = "QUEUED"         # Order created, every courier busy
    REJECTED = "REJECTED"     # Nothing was written
