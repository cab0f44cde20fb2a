import smtplib
from datetime import datetime, timedelta, timezone
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import List

from pydantic import ValidationError

from sunny_auto.core.config import settings
from sunny_auto.core.config_loader import load_shop_config, get_notification_config
from sunny_auto.core.errors import BackendUnavailable, ValidationFailed
from sunny_auto.core.logger import logger
from sunny_auto.models.booking import FinanceRecord, PAYMENT_METHOD_LABELS
from sunny_auto.models.notification import Notification, SendNotificationRequest
from sunny_auto.services.db_service import db_service


# --- In-app notifications ---

def build_notifications(req: SendNotificationRequest, now: datetime = None) -> List[dict]:
    """One row per recipient; rejects requests without title, message or recipients."""
    if not req.title.strip() or not req.message.strip():
        raise ValidationFailed("Please fill in title and message")
    if not req.user_ids:
        raise ValidationFailed("Please select at least one user")

    now = now or datetime.now(timezone.utc)
    expires_at = (now + timedelta(days=req.expires_in_days)).isoformat()
    return [
        {
            "user_id": user_id,
            "title": req.title,
            "message": req.message,
            "type": req.type,
            "expires_at": expires_at,
        }
        for user_id in req.user_ids
    ]


async def send_notifications(req: SendNotificationRequest) -> int:
    rows = build_notifications(req)
    if not await db_service.insert_row(settings.NOTIFICATIONS_TABLE, rows):
        raise BackendUnavailable("Failed to send notification")
    logger.info(f"🔔 Notification '{req.title}' sent to {len(rows)} users")
    return len(rows)


async def list_notifications() -> List[Notification]:
    notifications = []
    for row in await db_service.list_notifications():
        try:
            notifications.append(Notification.model_validate(row))
        except ValidationError as e:
            logger.warning(f"⚠️ Skipping malformed notification {row.get('id')}: {e.error_count()} errors")
    return notifications


async def delete_notification(notification_id: str):
    if not await db_service.delete_notification(notification_id):
        raise BackendUnavailable("Error deleting notification")


# --- E-mail ---

def send_email(subject: str, body: str, to_email: str = None) -> bool:
    """
    Sends an email using SMTP (e.g., Gmail).
    Defaults `to_email` to the owner_email from the shop config if not provided.
    Returns: True if successful, False otherwise.
    """
    config = load_shop_config()
    notif_config = get_notification_config(config)

    if not notif_config.get("email_enabled", False):
        logger.info("ℹ️ Email notifications are disabled in config.")
        return False

    if not to_email:
        to_email = config.get("owner_email")
        if not to_email:
            logger.error("❌ No recipient email found (owner_email missing in config).")
            return False

    if not settings.SMTP_USERNAME or not settings.SMTP_PASSWORD:
        logger.error("❌ SMTP credentials missing in .env.")
        return False

    try:
        msg = MIMEMultipart()
        msg['From'] = settings.SMTP_USERNAME
        msg['To'] = to_email
        msg['Subject'] = subject

        msg.attach(MIMEText(body, 'plain'))

        server = smtplib.SMTP(settings.SMTP_SERVER, settings.SMTP_PORT)
        server.starttls()
        server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.sendmail(settings.SMTP_USERNAME, to_email, msg.as_string())
        server.quit()

        logger.info(f"✅ Email sent to {to_email} with subject: '{subject}'")
        return True
    except Exception as e:
        logger.error(f"❌ Failed to send email: {e}")
        return False


def receipt_body(record: FinanceRecord, shop_name: str) -> str:
    method = PAYMENT_METHOD_LABELS.get(record.payment_method, "Unknown")
    return (
        f"Hi {record.name or 'there'},\n\n"
        f"Thank you for choosing {shop_name}. We received your payment.\n\n"
        f"Invoice:  {record.invoice_number}\n"
        f"Service:  {record.service_type}\n"
        f"Vehicle:  {record.vehicle_type}\n"
        f"Amount:   ${record.amount:,.2f}\n"
        f"Method:   {method}\n"
        f"Date:     {record.payment_date.isoformat() if record.payment_date else ''}\n"
    )


def send_payment_receipt(record: FinanceRecord) -> bool:
    config = load_shop_config()
    if not get_notification_config(config).get("payment_receipts", False):
        return False
    shop_name = config.get("shop_name", "Sunny Auto")
    return send_email(f"{shop_name} receipt {record.invoice_number}", receipt_body(record, shop_name), record.email)
