from datetime import datetime
from typing import Optional

from participium.schemas.base import CamelModel


class NotificationResponse(CamelModel):
    id: int
    user_id: int
    report_id: Optional[int] = None
    content: str
    is_read: bool
    created_at: Optional[datetime] = None


class UnreadCountResponse(CamelModel):
    unread_count: int
