from datetime import datetime

from pydantic import BaseModel


class NotificationDTO(BaseModel):
    id: str
    text: str = ""
    icon_url: str = ""
    created_at: datetime | None = None
