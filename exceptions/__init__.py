"""
Custom exceptions for the storefront client.

Exception Hierarchy:
--------------------
StorefrontException (base)
├── RemoteCallException
├── ValidationException
│   ├── EmptyCartException
│   ├── MissingSessionException
│   ├── ActiveOrderExistsException
│   ├── InvalidCredentialsException
│   ├── EmployeeNotFoundException
│   ├── CustomerNotFoundException
│   ├── EmailAlreadyRegisteredException
│   ├── ReservedLoginException
│   └── InvalidRatingException
├── OrderException
│   ├── OrderNotFoundException
│   └── InvalidOrderTransitionException
└── FeedbackSubmitException

Usage:
------
Services raise specific exceptions:
    raise OrderNotFoundException(order_id="recXXXX")

Callers turn them into user-facing text:
    try:
        await OrderService.update_status(order_id, OrderStatus.PACKING, client)
    except StorefrontException as e:
        message = handle_service_error(e, AppEntity.EMPLOYEE)
"""

from .base import StorefrontException
from .feedback import FeedbackSubmitException
from .order import OrderException, OrderNotFoundException, InvalidOrderTransitionException
from .remote import RemoteCallException
from .validation import (
    ValidationException,
    EmptyCartException,
    MissingSessionException,
    ActiveOrderExistsException,
    InvalidCredentialsException,
    EmployeeNotFoundException,
    CustomerNotFoundException,
    EmailAlreadyRegisteredException,
    ReservedLoginException,
    InvalidRatingException,
)

__all__ = [
    # Base
    'StorefrontException',

    # Remote
    'RemoteCallException',

    # Validation
    'ValidationException',
    'EmptyCartException',
    'MissingSessionException',
    'ActiveOrderExistsException',
    'InvalidCredentialsException',
    'EmployeeNotFoundException',
    'CustomerNotFoundException',
    'EmailAlreadyRegisteredException',
    'ReservedLoginException',
    'InvalidRatingException',

    # Order
    'OrderException',
    'OrderNotFoundException',
    'InvalidOrderTransitionException',

    # Feedback
    'FeedbackSubmitException',
]
