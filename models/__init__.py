"""
Models Package

Pydantic DTOs of the storefront domain. Remote records are converted into these
by utils/record_mapper.py; field names of the remote tables are in models/fields.py.
"""

from models.cart_item import CartItemDTO, CartChange
from models.checkout import CheckoutResult
from models.notification import NotificationDTO
from models.order import OrderDTO, OrderProductInfoDTO, FullOrderDetailsDTO
from models.product import ProductDTO
from models.review import ReviewDTO
from models.user import UserDTO

__all__ = [
    'CartItemDTO',
    'CartChange',
    'CheckoutResult',
    'NotificationDTO',
    'OrderDTO',
    'OrderProductInfoDTO',
    'FullOrderDetailsDTO',
    'ProductDTO',
    'ReviewDTO',
    'UserDTO',
]
