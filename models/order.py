from datetime import datetime

from pydantic import BaseModel

import config
from enums.order_status import OrderStatus
from enums.weight_status import WeightStatus


class OrderDTO(BaseModel):
    id: str
    order_number: str = ""
    customer_id: str = ""
    product_ids: list[str] = []
    products: str = ""              # "<name> - <qty> <unit>, ..."
    total_amount: float = 0.0
    delivery_time: int = config.DEFAULT_DELIVERY_MINUTES
    status: OrderStatus = OrderStatus.ACCEPTED
    address: str = ""
    created_at: datetime | None = None
    employee_ids: list[str] = []

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


class OrderProductInfoDTO(BaseModel):
    id: str
    name: str
    image_url: str = ""
    barcode: str = "N/A"
    quantity: float = 0
    weight_status: WeightStatus = WeightStatus.PIECE
    weight_per_piece: float | None = None
    weight: str | None = None


class FullOrderDetailsDTO(OrderDTO):
    products_info: list[OrderProductInfoDTO] = []
