"""
Tests for Error Handler Utility

Tests the centralized error handling system that converts
custom exceptions to localized user-friendly messages.
"""

from unittest.mock import patch

from enums.app_entity import AppEntity
from exceptions import (
    ActiveOrderExistsException,
    EmployeeNotFoundException,
    InvalidOrderTransitionException,
    OrderNotFoundException,
    RemoteCallException,
    StorefrontException,
)
from utils.error_handler import handle_service_error, handle_unexpected_error


class TestErrorHandler:
    """Test error handling utility"""

    @patch('utils.error_handler.Localizator')
    def test_order_not_found_is_formatted(self, mock_localizator):
        mock_localizator.get_text.return_value = "Заказ {order_id} не найден."

        result = handle_service_error(OrderNotFoundException("recO1"), AppEntity.EMPLOYEE)

        mock_localizator.get_text.assert_called_with(AppEntity.EMPLOYEE, "error_order_not_found")
        assert result == "Заказ recO1 не найден."

    @patch('utils.error_handler.Localizator')
    def test_customer_errors_use_customer_section(self, mock_localizator):
        mock_localizator.get_text.return_value = "У вас уже есть активный заказ."

        handle_service_error(ActiveOrderExistsException("recC1", "recO1"))

        mock_localizator.get_text.assert_called_with(AppEntity.CUSTOMER, "error_active_order_exists")

    @patch('utils.error_handler.Localizator')
    def test_employee_errors_use_employee_section(self, mock_localizator):
        mock_localizator.get_text.return_value = "Неверный пароль сотрудника."

        handle_service_error(EmployeeNotFoundException(), AppEntity.COMMON)

        mock_localizator.get_text.assert_called_with(AppEntity.EMPLOYEE, "error_employee_not_found")

    @patch('utils.error_handler.Localizator')
    def test_missing_format_parameter_returns_raw_text(self, mock_localizator):
        mock_localizator.get_text.return_value = "Ошибка {unknown}"

        result = handle_service_error(RemoteCallException(500, "boom"))

        assert result == "Ошибка {unknown}"

    @patch('utils.error_handler.Localizator')
    def test_unmapped_exception_returns_generic_message(self, mock_localizator):
        mock_localizator.get_text.return_value = "Произошла неизвестная ошибка."

        result = handle_service_error(StorefrontException("something"))

        mock_localizator.get_text.assert_called_with(AppEntity.COMMON, "error_unexpected")
        assert result == "Произошла неизвестная ошибка."

    def test_real_localization_of_transition_error(self):
        exc = InvalidOrderTransitionException("recO1", "доставлен", "сборка")
        result = handle_service_error(exc, AppEntity.EMPLOYEE)
        assert "«доставлен»" in result
        assert "«сборка»" in result

    def test_unexpected_error(self):
        result = handle_unexpected_error(ValueError("boom"))
        assert result == "Произошла неизвестная ошибка."
