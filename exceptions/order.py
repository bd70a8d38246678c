"""
Order-related exceptions.
"""

from .base import StorefrontException


class OrderException(StorefrontException):
    """Base exception for order-related errors."""
    pass


class OrderNotFoundException(OrderException):
    """Raised when an order record does not exist."""

    def __init__(self, order_id: str):
        super().__init__(
            f"Order {order_id} not found",
            details={'order_id': order_id}
        )
        self.order_id = order_id


class InvalidOrderTransitionException(OrderException):
    """Raised when a status change skips, reverses or leaves a final status."""

    def __init__(self, order_id: str, current_status: str, new_status: str):
        super().__init__(
            f"Order {order_id} cannot move from '{current_status}' to '{new_status}'",
            details={'order_id': order_id, 'current_status': current_status, 'new_status': new_status}
        )
        self.order_id = order_id
        self.current_status = current_status
        self.new_status = new_status
