from datetime import datetime

from pydantic import BaseModel


class ReviewDTO(BaseModel):
    id: str | None = None
    rating: int = 0
    text: str | None = None
    email: str | None = None
    product_ids: list[str] = []
    created_at: datetime | None = None
