from pydantic import BaseModel, field_validator

from enums.weight_status import WeightStatus

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/300x200.png?text=No+Image"


class ProductDTO(BaseModel):
    id: str
    name: str
    category: str = "Uncategorized"
    description: str = "No description available."
    price: float
    discount: float = 0.0           # Percent, 0..100
    rating: float = 0.0
    available_stock: float = 0
    weight_status: WeightStatus = WeightStatus.PIECE
    weight_per_piece: float | None = None   # Kilograms
    weight: str | None = None
    price_per_kg: float | None = None
    barcode: str = ""
    image_url: str = PLACEHOLDER_IMAGE_URL

    @field_validator('available_stock')
    @classmethod
    def stock_not_negative(cls, v: float) -> float:
        return max(v, 0)

    @property
    def is_weight_based(self) -> bool:
        return self.weight_status == WeightStatus.BY_WEIGHT

    @property
    def unit(self) -> str:
        return self.weight_status.unit

    @property
    def unit_price(self) -> float:
        """Price of one unit: per kg for weight-based products, per piece otherwise."""
        if self.is_weight_based and self.price_per_kg:
            return self.price_per_kg
        return self.price

    @property
    def discounted_price(self) -> float:
        if self.discount and self.discount > 0:
            return self.unit_price * (1 - self.discount / 100)
        return self.unit_price

    @property
    def add_step(self) -> float:
        """
        Quantity added by one "add to cart" action.

        Piece products step by one unit. Weight-based products step by 1 kg for
        heavy pieces (>= 1 kg each), 0.1 kg for tiny ones (< 40 g) and 0.5 kg
        otherwise.
        """
        if not self.is_weight_based:
            return 1
        if self.weight_per_piece and self.weight_per_piece >= 1:
            return 1
        if self.weight_per_piece and self.weight_per_piece < 0.04:
            return 0.1
        return 0.5

    def weight_of(self, quantity: float) -> float:
        """Cart weight in kg contributed by the given quantity of this product."""
        if self.is_weight_based:
            return quantity
        return (self.weight_per_piece or 0.5) * quantity
