"""
Validation exceptions raised before anything is written to the remote base.
"""

from .base import StorefrontException


class ValidationException(StorefrontException):
    """Base exception for rejected user input or preconditions."""
    pass


class EmptyCartException(ValidationException):
    """Raised when nothing in the cart can be purchased."""

    def __init__(self, user_id: str):
        super().__init__(
            f"No purchasable items in cart for user {user_id}",
            details={'user_id': user_id}
        )
        self.user_id = user_id


class MissingSessionException(ValidationException):
    """Raised when an operation needs a logged-in user and there is none."""

    def __init__(self, operation: str):
        super().__init__(
            f"No user session for {operation}",
            details={'operation': operation}
        )
        self.operation = operation


class ActiveOrderExistsException(ValidationException):
    """Raised when a customer tries to place a second concurrent order."""

    def __init__(self, user_id: str, order_id: str):
        super().__init__(
            f"User {user_id} already has active order {order_id}",
            details={'user_id': user_id, 'order_id': order_id}
        )
        self.user_id = user_id
        self.order_id = order_id


class InvalidCredentialsException(ValidationException):
    """Raised when a customer password does not match."""

    def __init__(self, login: str):
        super().__init__(
            f"Invalid password for {login}",
            details={'login': login}
        )
        self.login = login


class EmployeeNotFoundException(ValidationException):
    """Raised when no employee record matches the given password."""

    def __init__(self):
        super().__init__("No employee matches the given password")


class CustomerNotFoundException(ValidationException):
    """Raised when no customer record matches the given email."""

    def __init__(self, email: str):
        super().__init__(
            f"Customer with email {email} not found",
            details={'email': email}
        )
        self.email = email


class EmailAlreadyRegisteredException(ValidationException):
    """Raised when registering an email that already has a customer record."""

    def __init__(self, email: str):
        super().__init__(
            f"Customer with email {email} already exists",
            details={'email': email}
        )
        self.email = email


class ReservedLoginException(ValidationException):
    """Raised when a customer tries to register with the employee login."""

    def __init__(self, login: str):
        super().__init__(
            f"Login '{login}' is reserved for employees",
            details={'login': login}
        )
        self.login = login


class InvalidRatingException(ValidationException):
    """Raised when a review rating is outside 1..5."""

    def __init__(self, rating: int):
        super().__init__(
            f"Rating must be between 1 and 5, got {rating}",
            details={'rating': rating}
        )
        self.rating = rating
