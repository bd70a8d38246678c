from enum import Enum


class OrderStatus(str, Enum):
    ACCEPTED = "принят"                     # Placed, waiting for a free courier or assembly
    ASSEMBLING = "сборка"
    PACKING = "фасовка"
    AWAITING_COURIER = "ожидает курьера"
    DELIVERING = "доставляется"
    DELIVERED = "доставлен"                 # Final
    CANCELLED = "отменен"                   # Final

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    @classmethod
    def from_string(cls, value: str | None) -> 'OrderStatus':
        """
        Convert a remote status value to OrderStatus.

        Unknown or empty values fall back to ACCEPTED, which is what a freshly
        created order carries.
        """
        if not value:
            return cls.ACCEPTED
        normalized = value.strip().lower()
        for status in cls:
            if status.value == normalized:
                return status
        return cls.ACCEPTED
