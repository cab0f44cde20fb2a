from fastapi import APIRouter, Depends, File, UploadFile

from sunny_auto.core.security import get_current_account, verify_admin_secret
from sunny_auto.models.profile import Account, Profile, ProfileUpdate
from sunny_auto.services.profile_service import ProfileService, admin_profile_service, profile_service


def build_router(prefix: str, service: ProfileService, dependencies=None) -> APIRouter:
    router = APIRouter(prefix=prefix, dependencies=dependencies or [])

    @router.get("", response_model=Profile)
    async def read_profile(account: Account = Depends(get_current_account)):
        return await service.get_or_create(account)

    @router.put("/{profile_id}", response_model=Profile)
    async def save_profile(profile_id: str, changes: ProfileUpdate,
                           account: Account = Depends(get_current_account)):
        return await service.update(account, profile_id, changes)

    @router.post("/avatar", response_model=Profile)
    async def upload_avatar(file: UploadFile = File(...), account: Account = Depends(get_current_account)):
        content = await file.read()
        return await service.upload_avatar(account, file.filename or "avatar", content, file.content_type)

    return router


router = build_router("/api/profile", profile_service)
admin_router = build_router("/api/admin/profile", admin_profile_service, [Depends(verify_admin_secret)])
