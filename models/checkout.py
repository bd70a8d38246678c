from pydantic import BaseModel, model_validator

from enums.checkout_outcome import CheckoutOutcome
from models.order import OrderDTO


class CheckoutResult(BaseModel):
    outcome: CheckoutOutcome
    message_key: str
    params: dict = {}
    order: OrderDTO | None = None

    @model_validator(mode='after')
    def order_matches_outcome(self):
        if self.outcome == CheckoutOutcome.REJECTED and self.order is not None:
            raise ValueError("Rejected checkout cannot carry an order")
        if self.outcome != CheckoutOutcome.REJECTED and self.order is None:
            raise ValueError(f"{self.outcome.value} checkout must carry the created order")
        return self

    @property
    def is_placed(self) -> bool:
        return self.outcome != CheckoutOutcome.REJECTED
