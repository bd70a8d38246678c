from pydantic import BaseModel

from models.product import ProductDTO


class CartItemDTO(ProductDTO):
    quantity: float = 0

    @property
    def is_available(self) -> bool:
        return self.available_stock > 0

    @property
    def quantity_in_stock(self) -> float:
        return min(self.quantity, self.available_stock)

    @property
    def line_total(self) -> float:
        return self.discounted_price * self.quantity_in_stock

    @classmethod
    def from_product(cls, product: ProductDTO, quantity: float) -> 'CartItemDTO':
        return cls(**product.model_dump(exclude={'quantity'}), quantity=quantity)


class CartChange(BaseModel):
    """Outcome of a cart mutation; message_key points into the customer l10n section."""
    accepted: bool
    message_key: str | None = None
    params: dict = {}
