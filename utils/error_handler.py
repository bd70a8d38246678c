"""
Error Handler Utility

Turns storefront exceptions into localized, user-facing messages.

Usage:
    from utils.error_handler import handle_service_error

    try:
        user = await auth.login(login, password)
    except StorefrontException as e:
        message = handle_service_error(e, AppEntity.CUSTOMER)
"""

import logging

from enums.app_entity import AppEntity
from exceptions import (
    StorefrontException,
    RemoteCallException,
    EmptyCartException,
    MissingSessionException,
    ActiveOrderExistsException,
    InvalidCredentialsException,
    EmployeeNotFoundException,
    CustomerNotFoundException,
    EmailAlreadyRegisteredException,
    ReservedLoginException,
    InvalidRatingException,
    OrderNotFoundException,
    InvalidOrderTransitionException,
    FeedbackSubmitException,
)
from utils.localizator import Localizator

logger = logging.getLogger(__name__)

ERROR_MAPPING = {
    RemoteCallException: "error_remote_call",

    # Validation
    EmptyCartException: "error_empty_cart",
    MissingSessionException: "error_missing_session",
    ActiveOrderExistsException: "error_active_order_exists",
    InvalidCredentialsException: "error_invalid_credentials",
    EmployeeNotFoundException: "error_employee_not_found",
    CustomerNotFoundException: "error_customer_not_found",
    EmailAlreadyRegisteredException: "error_email_already_registered",
    ReservedLoginException: "error_reserved_login",
    InvalidRatingException: "error_invalid_rating",

    # Orders
    OrderNotFoundException: "error_order_not_found",
    InvalidOrderTransitionException: "error_invalid_order_transition",

    FeedbackSubmitException: "error_feedback_submit",
}

# Exceptions that are expected to carry customer/employee-section messages
_CUSTOMER_KEYS = {"error_empty_cart", "error_active_order_exists", "error_invalid_credentials",
                  "error_customer_not_found", "error_email_already_registered", "error_reserved_login"}
_EMPLOYEE_KEYS = {"error_employee_not_found"}


def handle_service_error(exception: StorefrontException, entity: AppEntity = AppEntity.COMMON) -> str:
    """
    Convert service exception to localized user-friendly error message.

    Args:
        exception: The custom exception raised by a service
        entity: Localization section to look in first

    Returns:
        Localized error message string
    """
    logger.warning(f"Service error handled: {type(exception).__name__} - {str(exception)}")

    localization_key = ERROR_MAPPING.get(type(exception))

    if not localization_key:
        logger.error(f"Unmapped exception type: {type(exception).__name__}")
        return Localizator.get_text(AppEntity.COMMON, "error_unexpected")

    if localization_key in _CUSTOMER_KEYS:
        entity = AppEntity.CUSTOMER
    elif localization_key in _EMPLOYEE_KEYS:
        entity = AppEntity.EMPLOYEE

    exception_data = {}
    for attribute in ('order_id', 'current_status', 'new_status', 'rating', 'email', 'topic', 'status'):
        if hasattr(exception, attribute):
            exception_data[attribute] = getattr(exception, attribute)

    try:
        return Localizator.get_text(entity, localization_key).format(**exception_data)
    except KeyError as e:
        logger.error(f"Missing format parameter in error message: {e}")
        return Localizator.get_text(entity, localization_key)


def handle_unexpected_error(exception: Exception) -> str:
    """
    Handle unexpected exceptions (non-StorefrontException).

    Logs the full exception and returns the generic message.
    """
    logger.error(f"Unexpected error: {type(exception).__name__} - {str(exception)}", exc_info=True)
    return Localizator.get_text(AppEntity.COMMON, "error_unexpected")
