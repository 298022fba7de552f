"""Image upload routes (multipart/form-data)."""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from storefront.api.deps import get_storage_service
from storefront.core.auth import Identity, require_admin, require_identity
from storefront.core.exceptions import AuthorizationError, ValidationError
from storefront.services.storage_service import StorageService

router = APIRouter()


async def _read_capped(file: UploadFile, max_bytes: int) -> bytes:
    # One byte past the cap is enough to reject oversize files
    return await file.read(max_bytes + 1)


@router.post("/upload-profile-picture")
async def upload_profile_picture(
    file: UploadFile | None = File(None),
    user_id: str | None = Form(None, alias="userId"),
    identity: Identity = Depends(require_identity),
    storage: StorageService = Depends(get_storage_service),
):
    """Upload the caller's own profile picture."""
    if user_id != identity.subject_id:
        raise AuthorizationError("Can only upload your own profile picture")
    if file is None or not user_id:
        raise ValidationError("File and userId required")

    content = await _read_capped(file, storage.settings.max_upload_bytes)
    url = await storage.upload_profile_picture(content, file.content_type, file.filename, user_id)
    return {"success": True, "url": url}


@router.post("/upload-image")
async def upload_image(
    file: UploadFile | None = File(None),
    image_type: str = Form("general", alias="type"),
    _: Identity = Depends(require_admin),
    storage: StorageService = Depends(get_storage_service),
):
    """Upload a blog or product image."""
    if file is None:
        raise ValidationError("File required")

    content = await _read_capped(file, storage.settings.max_upload_bytes)
    url = await storage.upload_image(content, file.content_type, file.filename, image_type)
    return {"success": True, "url": url}
