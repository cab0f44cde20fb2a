from typing import List

from fastapi import APIRouter, Depends

from sunny_auto.core.config import settings
from sunny_auto.core.security import verify_admin_secret
from sunny_auto.models.notification import Notification, SendNotificationRequest
from sunny_auto.services import notification_service
from sunny_auto.services.db_service import db_service

router = APIRouter(prefix="/api/admin", dependencies=[Depends(verify_admin_secret)])


@router.get("/users")
async def users():
    """Customer profiles that can receive notifications."""
    return await db_service.list_profiles(settings.PROFILES_TABLE)


@router.get("/notifications", response_model=List[Notification])
async def list_notifications():
    return await notification_service.list_notifications()


@router.post("/notifications", status_code=201)
async def send_notification(req: SendNotificationRequest):
    sent = await notification_service.send_notifications(req)
    return {"message": f"Notification sent to {sent} users", "sent": sent}


@router.delete("/notifications/{notification_id}")
async def delete_notification(notification_id: str):
    await notification_service.delete_notification(notification_id)
    return {"message": "Notification deleted"}
