"""
Unit Tests: Record mappers

Covers the tolerant mapping of raw records into DTOs and the field dicts
written back to the base.
"""

import pytest

from enums.employee_status import EmployeeStatus
from enums.order_status import OrderStatus
from enums.user_role import UserRole
from enums.weight_status import WeightStatus
from models.cart_item import CartItemDTO
from models.fields import CustomerFields, OrderFields, ProductFields
from models.product import PLACEHOLDER_IMAGE_URL, ProductDTO
from utils import record_mapper


def _record(record_id="recP1", created="2024-05-01T10:00:00.000Z", **fields):
    return {"id": record_id, "createdTime": created, "fields": fields}


class TestProductMapping:

    def test_full_piece_product(self):
        record = _record(**{
            ProductFields.NAME: "Мандарин",
            ProductFields.PRICE: 120,
            ProductFields.CATEGORY: "Фрукты",
            ProductFields.DISCOUNT: 0.1,
            ProductFields.STOCK: 7,
            ProductFields.WEIGHT_PER_PIECE: 80,
            ProductFields.PHOTO: [{"url": "https://img/full.jpg",
                                   "thumbnails": {"large": {"url": "https://img/large.jpg"}}}],
        })
        product = record_mapper.product_from_record(record)

        assert product.name == "Мандарин"
        assert product.discount == pytest.approx(10)
        assert product.discounted_price == pytest.approx(108)
        assert product.weight_per_piece == pytest.approx(0.08)
        assert product.image_url == "https://img/large.jpg"
        assert product.weight_status == WeightStatus.PIECE
        assert product.price_per_kg is None

    def test_weight_product_gets_price_per_kg(self):
        record = _record(**{
            ProductFields.NAME: "Сыр",
            ProductFields.PRICE: 900,
            ProductFields.WEIGHT_STATUS: "на развес",
        })
        product = record_mapper.product_from_record(record)
        assert product.is_weight_based
        assert product.price_per_kg == 900
        assert product.unit == "кг"

    def test_defaults_for_missing_optional_fields(self):
        product = record_mapper.product_from_record(_record(**{
            ProductFields.NAME: ["Хлеб"],
            ProductFields.PRICE: 50,
        }))
        assert product.category == "Uncategorized"
        assert product.description == "No description available."
        assert product.image_url == PLACEHOLDER_IMAGE_URL
        assert product.available_stock == 0

    @pytest.mark.parametrize("fields", [
        {ProductFields.PRICE: 50},
        {ProductFields.NAME: "Хлеб"},
        {ProductFields.NAME: "Хлеб", ProductFields.PRICE: "50"},
    ])
    def test_records_without_name_or_numeric_price_are_dropped(self, fields):
        assert record_mapper.product_from_record(_record(**fields)) is None
        assert record_mapper.products_from_records([_record(**fields)]) == []

    def test_negative_stock_is_clamped(self):
        product = record_mapper.product_from_record(_record(**{
            ProductFields.NAME: "Хлеб", ProductFields.PRICE: 50, ProductFields.STOCK: -3,
        }))
        assert product.available_stock == 0


class TestCartMapping:

    def _products(self):
        return [
            ProductDTO(id="recA", name="Мандарин", price=100, available_stock=10),
            ProductDTO(id="recB", name="Сыр", price=900, available_stock=2,
                       weight_status=WeightStatus.BY_WEIGHT, price_per_kg=900),
        ]

    def test_cart_round_trip_drops_zero_quantities(self):
        record = _record("recC1", **{CustomerFields.CART_QUANTITIES: "Мандарин - 3 шт, Сыр - 0 кг"})
        items = record_mapper.cart_items_from_record(record, self._products())
        assert [(item.id, item.quantity) for item in items] == [("recA", 3.0)]

    def test_cart_fields(self):
        items = [CartItemDTO.from_product(self._products()[1], 0.5)]
        assert record_mapper.cart_fields(items, 450) == {
            CustomerFields.CART_PRODUCTS: ["recB"],
            CustomerFields.CART_QUANTITIES: "Сыр - 0.5 кг",
            CustomerFields.CART_TOTAL: 450,
        }


class TestOrderMapping:

    def test_order_from_record(self):
        record = _record("recO1", **{
            OrderFields.NUMBER: "ED-123456",
            OrderFields.CUSTOMER: ["recC1"],
            OrderFields.PRODUCTS: ["recA"],
            OrderFields.QUANTITIES: "Мандарин - 2 шт",
            OrderFields.TOTAL: 299,
            OrderFields.STATUS: "доставляется",
            OrderFields.EMPLOYEES: ["recE1"],
        })
        order = record_mapper.order_from_record(record)
        assert order.customer_id == "recC1"
        assert order.status == OrderStatus.DELIVERING
        assert order.delivery_time == 15
        assert order.employee_ids == ["recE1"]
        assert order.created_at.year == 2024

    def test_unknown_status_falls_back_to_accepted(self):
        order = record_mapper.order_from_record(_record("recO1", **{OrderFields.STATUS: "перенесен"}))
        assert order.status == OrderStatus.ACCEPTED

    def test_full_details_use_na_barcode(self):
        record = _record("recO1", **{OrderFields.QUANTITIES: "Мандарин - 2 шт"})
        products = [ProductDTO(id="recA", name="Мандарин", price=100)]
        details = record_mapper.full_order_details(record, products)
        assert details.products_info[0].barcode == "N/A"
        assert details.products_info[0].quantity == 2

    def test_order_fields_for_unassigned_order(self):
        item = CartItemDTO.from_product(ProductDTO(id="recA", name="Мандарин", price=100), 2)
        fields = record_mapper.order_fields("recC1", [item], 299, "ул. Мира, 5", None, "ED-000001")
        assert fields[OrderFields.STATUS] == "принят"
        assert fields[OrderFields.EMPLOYEES] == []
        assert fields[OrderFields.QUANTITIES] == "Мандарин - 2 шт"
        assert OrderFields.CREATED_AT not in fields


class TestUserMapping:

    def test_employee_without_email_gets_fallback(self):
        employee = record_mapper.employee_from_record(_record("recE1", **{"статус": "на линии", "имя": "Иван"}))
        assert employee.role == UserRole.EMPLOYEE
        assert employee.email == "work"
        assert employee.status == EmployeeStatus.ONLINE

    def test_customer_password_not_dumped(self):
        customer = record_mapper.customer_from_record(_record("recC1", email="a@b.c", password="secret"))
        assert customer.password == "secret"
        assert "password" not in customer.model_dump()


class TestNotificationMapping:

    def test_notification_uses_sent_at_field(self):
        record = _record("recN1", **{
            "текст уведомления": "Доставлен",
            "время отправления": "2024-06-01T12:30:00.000Z",
            "иконка": [{"url": "https://img/icon.png"}],
        })
        notification = record_mapper.notification_from_record(record)
        assert notification.created_at.month == 6
        assert notification.icon_url == "https://img/icon.png"

    def test_notification_fields(self):
        fields = record_mapper.notification_fields("Доставлен", "recC1", "https://img/icon.png")
        assert fields["иконка"] == [{"url": "https://img/icon.png"}]
        assert fields["Table 1"] == ["recC1"]
