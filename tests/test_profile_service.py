import pytest

from sunny_auto.core.errors import BackendUnavailable, Forbidden, ValidationFailed
from sunny_auto.models.profile import ProfileUpdate
from sunny_auto.services.profile_service import ProfileService, default_profile
from tests.factories import account


def test_default_profile_comes_from_identity_claims():
    row = default_profile(account())

    assert row["id"] == account().id
    assert row["email"] == "jane@example.com"
    assert row["full_name"] == "Jane Doe"
    assert row["phone"] == "+1 (555) 222-3333"
    assert row["bio"] is None
    assert row["created_at"] == row["updated_at"]


@pytest.mark.asyncio
async def test_existing_profile_is_returned(mock_db):
    mock_db.get_profile.return_value = {"id": account().id, "email": "jane@example.com", "bio": "hi"}

    profile = await ProfileService("profiles").get_or_create(account())

    assert profile.bio == "hi"
    mock_db.insert_profile.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_profile_is_created_on_first_access(mock_db):
    mock_db.insert_profile.side_effect = lambda table, row: row

    profile = await ProfileService("profiles").get_or_create(account())

    assert profile.full_name == "Jane Doe"
    table, row = mock_db.insert_profile.await_args.args
    assert table == "profiles"
    assert row["id"] == account().id


@pytest.mark.asyncio
async def test_profile_creation_failure(mock_db):
    mock_db.insert_profile.return_value = None

    with pytest.raises(BackendUnavailable):
        await ProfileService("profiles").get_or_create(account())


@pytest.mark.asyncio
async def test_update_other_users_profile_is_forbidden(mock_db):
    with pytest.raises(Forbidden):
        await ProfileService("profiles").update(account(), "someone-else", ProfileUpdate(bio="x"))
    mock_db.update_profile.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_only_sends_given_fields(mock_db):
    mock_db.get_profile.return_value = {"id": account().id, "email": "jane@example.com", "phone": "old"}
    mock_db.update_profile.return_value = True

    profile = await ProfileService("profiles").update(account(), account().id, ProfileUpdate(bio="Loves old Fords"))

    _, account_id, changes = mock_db.update_profile.await_args.args
    assert account_id == account().id
    assert set(changes) == {"bio", "updated_at"}
    assert profile.bio == "Loves old Fords"
    assert profile.phone == "old"


@pytest.mark.asyncio
async def test_avatar_upload_stores_public_url(mock_db):
    mock_db.get_profile.return_value = {"id": account().id, "email": "jane@example.com"}
    mock_db.upload_file.return_value = "https://cdn.example/avatars/x.png"
    mock_db.update_profile.return_value = True

    profile = await ProfileService("profiles").upload_avatar(account(), "me.PNG", b"\x89PNG...", "image/png")

    key, content, content_type = mock_db.upload_file.await_args.args
    assert key.startswith(f"{account().id}/")
    assert key.endswith(".png")
    assert content_type == "image/png"
    assert profile.avatar_url == "https://cdn.example/avatars/x.png"


@pytest.mark.asyncio
async def test_avatar_upload_rejects_non_images(mock_db):
    with pytest.raises(ValidationFailed):
        await ProfileService("profiles").upload_avatar(account(), "notes.txt", b"hello", "text/plain")
    mock_db.upload_file.assert_not_awaited()


@pytest.mark.asyncio
async def test_avatar_upload_failure(mock_db):
    mock_db.get_profile.return_value = {"id": account().id, "email": "jane@example.com"}
    mock_db.upload_file.return_value = None

    with pytest.raises(BackendUnavailable):
        await ProfileService("profiles").upload_avatar(account(), "me.jpg", b"jpeg", "image/jpeg")
    mock_db.update_profile.assert_not_awaited()
