from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

NotificationType = Literal["info", "warning", "success", "error"]


class Notification(BaseModel):
    id: Optional[str] = None
    user_id: str
    title: str
    message: str
    type: NotificationType = "info"
    is_read: bool = False
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class SendNotificationRequest(BaseModel):
    user_ids: List[str] = Field(default_factory=list)
    title: str = ""
    message: str = ""
    type: NotificationType = "info"
    expires_in_days: int = 7
