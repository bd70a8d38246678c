"""
Order State Machine for validating order status transitions.

Orders move along a single chain, one step at a time:

    принят -> сборка -> фасовка -> ожидает курьера -> доставляется -> доставлен

and can be cancelled (отменен) from any status that is not final. доставлен and
отменен are final. A delivery delay keeps the status and only extends the
delivery time; it is allowed while the order is being delivered.
"""

import logging
from typing import Dict, List, Optional, Set

from enums.order_status import OrderStatus
from exceptions import InvalidOrderTransitionException

logger = logging.getLogger(__name__)


class OrderStatusTransition:
    """Represents a valid status transition with metadata"""

    def __init__(self, from_status: OrderStatus, to_status: OrderStatus, description: str = ""):
        self.from_status = from_status
        self.to_status = to_status
        self.description = description

    def __repr__(self):
        return f"{self.from_status.value} -> {self.to_status.value}"


class OrderStateMachine:
    """
    Finite state machine for order status transitions.

    Invalid transitions (rejected):
    - skipping a step (принят -> фасовка)
    - going back (доставляется -> сборка)
    - anything out of доставлен or отменен
    """

    CHAIN: List[OrderStatus] = [
        OrderStatus.ACCEPTED,
        OrderStatus.ASSEMBLING,
        OrderStatus.PACKING,
        OrderStatus.AWAITING_COURIER,
        OrderStatus.DELIVERING,
        OrderStatus.DELIVERED,
    ]

    VALID_TRANSITIONS: List[OrderStatusTransition] = [
        OrderStatusTransition(OrderStatus.ACCEPTED, OrderStatus.ASSEMBLING, "Courier started assembling"),
        OrderStatusTransition(OrderStatus.ASSEMBLING, OrderStatus.PACKING, "Items assembled, packing"),
        OrderStatusTransition(OrderStatus.PACKING, OrderStatus.AWAITING_COURIER, "Packed, waiting for pickup"),
        OrderStatusTransition(OrderStatus.AWAITING_COURIER, OrderStatus.DELIVERING, "Courier on the way"),
        OrderStatusTransition(OrderStatus.DELIVERING, OrderStatus.DELIVERED, "Handed over to the customer"),
    ] + [
        OrderStatusTransition(status, OrderStatus.CANCELLED, "Order cancelled")
        for status in (
            OrderStatus.ACCEPTED,
            OrderStatus.ASSEMBLING,
            OrderStatus.PACKING,
            OrderStatus.AWAITING_COURIER,
            OrderStatus.DELIVERING,
        )
    ]

    DELAYABLE_STATUSES: Set[OrderStatus] = {OrderStatus.DELIVERING}

    _transition_map: Dict[OrderStatus, Set[OrderStatus]] = {}
    _transition_descriptions: Dict[tuple, str] = {}

    @classmethod
    def _build_transition_map(cls):
        """Build internal transition maps for fast lookup"""
        if cls._transition_map:
            return

        for transition in cls.VALID_TRANSITIONS:
            cls._transition_map.setdefault(transition.from_status, set()).add(transition.to_status)
            cls._transition_descriptions[(transition.from_status, transition.to_status)] = transition.description

    @classmethod
    def is_valid_transition(cls, from_status: OrderStatus, to_status: OrderStatus) -> bool:
        """
        Check if a status transition is valid.

        Staying in the same status is not a transition and is rejected; use
        can_delay() for the one same-status operation.
        """
        cls._build_transition_map()
        return to_status in cls._transition_map.get(from_status, set())

    @classmethod
    def get_valid_transitions(cls, from_status: OrderStatus) -> List[OrderStatus]:
        cls._build_transition_map()
        return sorted(cls._transition_map.get(from_status, set()), key=cls._order_key)

    @classmethod
    def _order_key(cls, status: OrderStatus) -> int:
        return cls.CHAIN.index(status) if status in cls.CHAIN else len(cls.CHAIN)

    @classmethod
    def next_status(cls, current_status: OrderStatus) -> Optional[OrderStatus]:
        """Next status along the delivery chain, or None for final statuses."""
        if cls.is_final_status(current_status):
            return None
        return cls.CHAIN[cls.CHAIN.index(current_status) + 1]

    @classmethod
    def is_final_status(cls, status: OrderStatus) -> bool:
        return status.is_terminal

    @classmethod
    def can_delay(cls, status: OrderStatus) -> bool:
        return status in cls.DELAYABLE_STATUSES

    @classmethod
    def get_transition_description(cls, from_status: OrderStatus, to_status: OrderStatus) -> str:
        cls._build_transition_map()
        return cls._transition_descriptions.get(
            (from_status, to_status),
            f"Transition from {from_status.value} to {to_status.value}"
        )

    @classmethod
    def validate_transition(cls, order_id: str, from_status: OrderStatus, to_status: OrderStatus,
                            employee_id: Optional[str] = None) -> None:
        """
        Validate a status transition and log it.

        Raises:
            InvalidOrderTransitionException: if the transition is not allowed
        """
        if not cls.is_valid_transition(from_status, to_status):
            logger.error(f"Invalid status transition for order {order_id}: {from_status.value} -> {to_status.value}")
            raise InvalidOrderTransitionException(order_id, from_status.value, to_status.value)

        performer = f"employee {employee_id}" if employee_id else "system"
        description = cls.get_transition_description(from_status, to_status)
        logger.info(f"ORDER_STATUS_TRANSITION: Order {order_id} {from_status.value} -> {to_status.value} by {performer}: {description}")


def get_next_valid_statuses(current_status: OrderStatus) -> List[OrderStatus]:
    return OrderStateMachine.get_valid_transitions(current_status)
