from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from sunny_auto.services.db_service import db_service


@pytest.fixture
def mock_db():
    """Replaces every Supabase-facing method of the shared db_service with AsyncMocks."""
    names = [
        "get_account", "fetch_appointments", "update_appointment", "get_profile", "insert_profile",
        "update_profile", "list_profiles", "upload_file", "fetch_available_services",
        "get_user_rewards", "list_points_transactions", "list_redeemed_rewards", "save_points",
        "insert_row", "list_notifications", "delete_notification", "list_services", "get_service",
        "insert_service", "update_service", "delete_service",
    ]
    patches = [patch.object(db_service, name, new_callable=AsyncMock) for name in names]
    mocks = {}
    for name, p in zip(names, patches):
        mocks[name] = p.start()
    mocks["fetch_appointments"].return_value = []
    mocks["fetch_available_services"].return_value = []
    mocks["list_profiles"].return_value = []
    mocks["list_services"].return_value = []
    mocks["get_service"].return_value = None
    mocks["insert_service"].return_value = None
    mocks["list_notifications"].return_value = []
    mocks["list_points_transactions"].return_value = []
    mocks["list_redeemed_rewards"].return_value = []
    mocks["get_user_rewards"].return_value = None
    mocks["get_profile"].return_value = None
    mocks["get_account"].return_value = None
    yield SimpleNamespace(**mocks)
    for p in patches:
        p.stop()
