from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from sunny_auto.core.errors import BackendUnavailable, ValidationFailed
from sunny_auto.models.notification import SendNotificationRequest
from sunny_auto.services import notification_service
from sunny_auto.services.finance_service import to_finance_record
from tests.factories import booking


def test_build_notifications_one_row_per_user():
    req = SendNotificationRequest(user_ids=["u1", "u2"], title="Closed Monday", message="Holiday", expires_in_days=3)

    rows = notification_service.build_notifications(req, now=datetime(2026, 10, 19, tzinfo=timezone.utc))

    assert [r["user_id"] for r in rows] == ["u1", "u2"]
    assert rows[0]["expires_at"] == "2026-10-22T00:00:00+00:00"
    assert rows[0]["type"] == "info"


@pytest.mark.parametrize("req", [
    SendNotificationRequest(user_ids=["u1"], title="", message="body"),
    SendNotificationRequest(user_ids=["u1"], title="title", message="  "),
    SendNotificationRequest(user_ids=[], title="title", message="body"),
])
def test_build_notifications_validation(req):
    with pytest.raises(ValidationFailed):
        notification_service.build_notifications(req)


@pytest.mark.asyncio
async def test_send_notifications_failure(mock_db):
    mock_db.insert_row.return_value = False
    req = SendNotificationRequest(user_ids=["u1"], title="t", message="m")

    with pytest.raises(BackendUnavailable):
        await notification_service.send_notifications(req)


@pytest.mark.asyncio
async def test_list_notifications_skips_bad_rows(mock_db):
    mock_db.list_notifications.return_value = [
        {"id": "n1", "user_id": "u1", "title": "t", "message": "m", "type": "info"},
        {"id": "n2", "title": "missing user"},
    ]

    notifications = await notification_service.list_notifications()

    assert [n.id for n in notifications] == ["n1"]


# Test Email (Mocked)
@patch("sunny_auto.services.notification_service.smtplib.SMTP")
def test_send_email_mocked(mock_smtp_cls):
    mock_server = MagicMock()
    mock_smtp_cls.return_value = mock_server

    with patch("sunny_auto.services.notification_service.load_shop_config") as mock_config:
        mock_config.return_value = {
            "notifications": {"email_enabled": True},
            "owner_email": "owner@test.com"
        }

        with patch.object(notification_service.settings, "SMTP_USERNAME", "user"), \
             patch.object(notification_service.settings, "SMTP_PASSWORD", "pass"):

            result = notification_service.send_email("Test Subject", "Test Body", "client@test.com")

            assert result is True
            mock_smtp_cls.assert_called_once()
            mock_server.starttls.assert_called_once()
            mock_server.login.assert_called_with("user", "pass")
            mock_server.sendmail.assert_called_once()


def test_send_email_disabled_in_config():
    with patch("sunny_auto.services.notification_service.load_shop_config",
               return_value={"notifications": {"email_enabled": False}}), \
         patch("sunny_auto.services.notification_service.smtplib.SMTP") as mock_smtp_cls:
        assert notification_service.send_email("s", "b", "x@test.com") is False
        mock_smtp_cls.assert_not_called()


def test_payment_receipt_goes_to_customer():
    record = to_finance_record(booking(status="completed", email="maria@example.com", payment_method="cash",
                                       payment_date="2026-10-19", service_type="Oil Change"))

    with patch("sunny_auto.services.notification_service.load_shop_config",
               return_value={"shop_name": "Sunny Auto", "notifications": {"payment_receipts": True}}), \
         patch("sunny_auto.services.notification_service.send_email", return_value=True) as mock_send:
        assert notification_service.send_payment_receipt(record) is True

    subject, body, to_email = mock_send.call_args.args
    assert record.invoice_number in subject
    assert "$89.99" in body
    assert "Cash" in body
    assert to_email == "maria@example.com"
