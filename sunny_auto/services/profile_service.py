import mimetypes
import uuid
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any, Dict

from sunny_auto.core.config import settings
from sunny_auto.core.errors import BackendUnavailable, Forbidden, ValidationFailed
from sunny_auto.core.logger import logger
from sunny_auto.models.profile import Account, Profile, ProfileUpdate
from sunny_auto.services.db_service import db_service

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}
MAX_AVATAR_BYTES = 5 * 1024 * 1024


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def default_profile(account: Account) -> Dict[str, Any]:
    """Row inserted the first time an account opens its profile."""
    meta = account.user_metadata or {}
    now = _now_iso()
    return {
        "id": account.id,
        "email": account.email,
        "full_name": meta.get("full_name"),
        "first_name": meta.get("first_name"),
        "last_name": meta.get("last_name"),
        "bio": None,
        "avatar_url": meta.get("avatar_url"),
        "phone": meta.get("phone"),
        "created_at": now,
        "updated_at": now,
    }


class ProfileService:
    def __init__(self, table: str = None):
        self.table = table or settings.PROFILES_TABLE

    async def get_or_create(self, account: Account) -> Profile:
        row = await db_service.get_profile(self.table, account.id)
        if row:
            return Profile.model_validate(row)

        created = await db_service.insert_profile(self.table, default_profile(account))
        if not created:
            raise BackendUnavailable("Could not load user profile")
        return Profile.model_validate(created)

    async def update(self, account: Account, profile_id: str, changes: ProfileUpdate) -> Profile:
        if profile_id != account.id:
            raise Forbidden("Unauthorized: This profile does not belong to you")

        current = await self.get_or_create(account)
        payload = changes.model_dump(exclude_unset=True)
        payload["updated_at"] = _now_iso()

        if not await db_service.update_profile(self.table, account.id, payload):
            raise BackendUnavailable("Error saving profile")
        return Profile.model_validate({**current.model_dump(), **payload})

    async def upload_avatar(self, account: Account, filename: str, content: bytes,
                            content_type: str = None) -> Profile:
        """
        Stores the image under <account id>/<random name> and points the profile at its public URL.
        Earlier uploads stay in the bucket.
        """
        content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationFailed("Please upload a JPEG, PNG, WebP or GIF image")
        if not content:
            raise ValidationFailed("The uploaded file is empty")
        if len(content) > MAX_AVATAR_BYTES:
            raise ValidationFailed("Image must be 5 MB or smaller")

        current = await self.get_or_create(account)
        suffix = PurePosixPath(filename).suffix.lower() or mimetypes.guess_extension(content_type) or ""
        key = f"{account.id}/{uuid.uuid4().hex}{suffix}"

        url = await db_service.upload_file(key, content, content_type)
        if not url:
            raise BackendUnavailable("Error uploading image")

        updated_at = _now_iso()
        if not await db_service.update_profile(self.table, account.id, {"avatar_url": url, "updated_at": updated_at}):
            raise BackendUnavailable("Error saving profile")
        logger.info(f"🖼️ Avatar updated for {account.email}")
        return current.model_copy(update={"avatar_url": url, "updated_at": datetime.fromisoformat(updated_at)})


profile_service = ProfileService()
admin_profile_service = ProfileService(settings.ADMIN_PROFILES_TABLE)
