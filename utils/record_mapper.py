"""
Conversion between raw remote records and domain DTOs.

Remote records look like {"id": "rec...", "createdTime": "...", "fields": {...}}.
Text fields may arrive as a scalar or a single-element list (lookup/rollup
fields), and optional fields may be missing entirely; every mapper tolerates both.
"""

import logging
from datetime import datetime

import config
from enums.employee_status import EmployeeStatus
from enums.order_status import OrderStatus
from enums.user_role import UserRole
from enums.weight_status import WeightStatus
from models.cart_item import CartItemDTO
from models.fields import (
    BannerFields,
    CustomerFields,
    EmployeeFields,
    FeedbackFields,
    NotificationFields,
    OrderFields,
    ProductFields,
    ReviewFields,
)
from models.notification import NotificationDTO
from models.order import FullOrderDetailsDTO, OrderDTO, OrderProductInfoDTO
from models.product import PLACEHOLDER_IMAGE_URL, ProductDTO
from models.review import ReviewDTO
from models.user import UserDTO
from utils.quantity_codec import encode_quantities, parse_quantities

logger = logging.getLogger(__name__)

EMPLOYEE_FALLBACK_EMAIL = "work"


def unwrap_text(value) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and value and isinstance(value[0], str):
        return value[0]
    return ""


def _number(value, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, list) and value and isinstance(value[0], (int, float)):
        return float(value[0])
    return default


def _links(value) -> list[str]:
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    if isinstance(value, str) and value:
        return [value]
    return []


def _attachment_url(value, prefer_thumbnail: bool = False) -> str | None:
    if not isinstance(value, list) or not value or not isinstance(value[0], dict):
        return None
    attachment = value[0]
    if prefer_thumbnail:
        large = ((attachment.get("thumbnails") or {}).get("large") or {}).get("url")
        if large:
            return large
    return attachment.get("url")


def _fields(record: dict) -> dict:
    return record.get("fields") or {}


def product_from_record(record: dict) -> ProductDTO | None:
    """Map a catalog record; records without a name or a numeric price are dropped."""
    fields = _fields(record)
    name = unwrap_text(fields.get(ProductFields.NAME))
    price = fields.get(ProductFields.PRICE)
    if not name or isinstance(price, bool) or not isinstance(price, (int, float)):
        logger.debug(f"Skipping catalog record {record.get('id')}: missing name or price")
        return None

    weight_status = WeightStatus.from_string(unwrap_text(fields.get(ProductFields.WEIGHT_STATUS)))
    weight_in_grams = _number(fields.get(ProductFields.WEIGHT_PER_PIECE))

    return ProductDTO(
        id=record["id"],
        name=name,
        price=float(price),
        category=unwrap_text(fields.get(ProductFields.CATEGORY)) or "Uncategorized",
        description=unwrap_text(fields.get(ProductFields.DESCRIPTION)) or "No description available.",
        rating=_number(fields.get(ProductFields.RATING)),
        image_url=_attachment_url(fields.get(ProductFields.PHOTO), prefer_thumbnail=True) or PLACEHOLDER_IMAGE_URL,
        discount=_number(fields.get(ProductFields.DISCOUNT)) * 100,
        barcode=unwrap_text(fields.get(ProductFields.BARCODE)),
        available_stock=_number(fields.get(ProductFields.STOCK)),
        weight=unwrap_text(fields.get(ProductFields.WEIGHT)) or None,
        weight_per_piece=weight_in_grams / 1000 if weight_in_grams else None,
        weight_status=weight_status,
        price_per_kg=float(price) if weight_status == WeightStatus.BY_WEIGHT else None,
    )


def products_from_records(records: list[dict]) -> list[ProductDTO]:
    return [product for product in map(product_from_record, records) if product is not None]


def cart_items_from_record(record: dict, products: list[ProductDTO]) -> list[CartItemDTO]:
    """Rebuild a cart from a customer record; entries with quantity 0 are dropped."""
    quantities = parse_quantities(_fields(record).get(CustomerFields.CART_QUANTITIES), products)
    items = [CartItemDTO.from_product(p, quantities.get(p.id, 0)) for p in products]
    return [item for item in items if item.quantity > 0]


def cart_fields(items: list[CartItemDTO], total: float) -> dict:
    return {
        CustomerFields.CART_PRODUCTS: [item.id for item in items],
        CustomerFields.CART_QUANTITIES: encode_quantities(items),
        CustomerFields.CART_TOTAL: total,
    }


def _created_at(record: dict, field: str | None = None) -> datetime | None:
    value = _fields(record).get(field) if field else None
    value = unwrap_text(value) or record.get("createdTime")
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparsable timestamp '{value}' on record {record.get('id')}")
        return None


def order_from_record(record: dict) -> OrderDTO:
    fields = _fields(record)
    return OrderDTO(
        id=record["id"],
        order_number=unwrap_text(fields.get(OrderFields.NUMBER)),
        customer_id=next(iter(_links(fields.get(OrderFields.CUSTOMER))), ""),
        product_ids=_links(fields.get(OrderFields.PRODUCTS)),
        products=unwrap_text(fields.get(OrderFields.QUANTITIES)),
        total_amount=_number(fields.get(OrderFields.TOTAL)),
        delivery_time=int(_number(fields.get(OrderFields.DELIVERY_TIME), config.DEFAULT_DELIVERY_MINUTES)),
        status=OrderStatus.from_string(unwrap_text(fields.get(OrderFields.STATUS))),
        address=unwrap_text(fields.get(OrderFields.ADDRESS)),
        created_at=_created_at(record),
        employee_ids=_links(fields.get(OrderFields.EMPLOYEES)),
    )


def full_order_details(record: dict, products: list[ProductDTO]) -> FullOrderDetailsDTO:
    order = order_from_record(record)
    quantities = parse_quantities(order.products, products)
    products_info = [
        OrderProductInfoDTO(
            id=p.id,
            name=p.name,
            image_url=p.image_url,
            barcode=p.barcode or "N/A",
            quantity=quantities.get(p.id, 0),
            weight_status=p.weight_status,
            weight_per_piece=p.weight_per_piece,
            weight=p.weight,
        )
        for p in products
    ]
    return FullOrderDetailsDTO(**order.model_dump(), products_info=products_info)


def order_fields(customer_id: str, items: list[CartItemDTO], total: float, address: str,
                 employee_id: str | None, order_number: str) -> dict:
    return {
        OrderFields.NUMBER: order_number,
        OrderFields.CUSTOMER: [customer_id],
        OrderFields.PRODUCTS: [item.id for item in items],
        OrderFields.QUANTITIES: encode_quantities(items),
        OrderFields.TOTAL: total,
        OrderFields.DELIVERY_TIME: config.DEFAULT_DELIVERY_MINUTES,
        OrderFields.STATUS: OrderStatus.ACCEPTED.value,
        OrderFields.ADDRESS: address,
        # "дата заказа" is a computed created-time field and is never written
        OrderFields.EMPLOYEES: [employee_id] if employee_id else [],
    }


def customer_from_record(record: dict) -> UserDTO:
    fields = _fields(record)
    return UserDTO(
        id=record["id"],
        name=unwrap_text(fields.get(CustomerFields.NAME)),
        email=unwrap_text(fields.get(CustomerFields.EMAIL)),
        phone=unwrap_text(fields.get(CustomerFields.PHONE)),
        role=UserRole.CUSTOMER,
        password=unwrap_text(fields.get(CustomerFields.PASSWORD)) or None,
    )


def customer_fields(name: str, email: str, phone: str, password: str) -> dict:
    return {
        CustomerFields.NAME: name,
        CustomerFields.EMAIL: email,
        CustomerFields.PHONE: phone,
        CustomerFields.PASSWORD: password,
    }


def employee_from_record(record: dict) -> UserDTO:
    fields = _fields(record)
    status = unwrap_text(fields.get(EmployeeFields.STATUS))
    return UserDTO(
        id=record["id"],
        name=unwrap_text(fields.get(EmployeeFields.NAME)),
        email=unwrap_text(fields.get(EmployeeFields.EMAIL)) or EMPLOYEE_FALLBACK_EMAIL,
        role=UserRole.EMPLOYEE,
        status=EmployeeStatus.ONLINE if status == EmployeeStatus.ONLINE.value else EmployeeStatus.OFFLINE,
        password=unwrap_text(fields.get(EmployeeFields.PASSWORD)) or None,
    )


def employee_order_ids(record: dict) -> list[str]:
    return _links(_fields(record).get(EmployeeFields.ORDERS))


def review_from_record(record: dict) -> ReviewDTO:
    fields = _fields(record)
    text = fields.get(ReviewFields.TEXT)
    return ReviewDTO(
        id=record.get("id"),
        rating=int(_number(fields.get(ReviewFields.RATING))),
        text=unwrap_text(text) or None,
        email=unwrap_text(fields.get(ReviewFields.EMAIL)) or None,
        product_ids=_links(fields.get(ReviewFields.PRODUCT)),
        created_at=_created_at(record),
    )


def review_fields(email: str, product_id: str, rating: int, text: str | None) -> dict:
    fields = {
        ReviewFields.EMAIL: email,
        ReviewFields.PRODUCT: [product_id],
        ReviewFields.RATING: rating,
    }
    if text:
        fields[ReviewFields.TEXT] = text
    return fields


def notification_from_record(record: dict) -> NotificationDTO:
    fields = _fields(record)
    return NotificationDTO(
        id=record["id"],
        text=unwrap_text(fields.get(NotificationFields.TEXT)),
        icon_url=_attachment_url(fields.get(NotificationFields.ICON)) or "",
        created_at=_created_at(record, NotificationFields.SENT_AT),
    )


def notification_fields(text: str, customer_id: str, icon_url: str) -> dict:
    return {
        NotificationFields.TEXT: text,
        NotificationFields.CUSTOMER: [customer_id],
        NotificationFields.ICON: [{"url": icon_url}],
    }


def banner_url(record: dict) -> str | None:
    return _attachment_url(_fields(record).get(BannerFields.IMAGE))


def feedback_fields(topic: str, text: str, error_text: str | None = None) -> dict:
    fields = {
        FeedbackFields.TOPIC: topic,
        FeedbackFields.TEXT: text,
    }
    if error_text:
        fields[FeedbackFields.ERROR_TEXT] = error_text
    return fields
