"""
Upload Routes

POST /upload - Upload a file for a file-type form field; returns its URL
"""

from fastapi import APIRouter, Depends, File, UploadFile

from placement_forms.api.dependencies import get_services
from placement_forms.core.auth import get_current_user
from placement_forms.schemas.schemas import UploadResponse
from placement_forms.services.container import ServiceContainer
from placement_forms.utils.file_upload import build_object_key, read_upload

router = APIRouter(prefix="/upload", tags=["Uploads"])


@router.post("", response_model=UploadResponse, status_code=201)
async def upload_file(
    file: UploadFile = File(..., description="File attached to a form answer"),
    user: dict = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """
    Upload a file to object storage.

    The returned `fileUrl` is what the client submits as the answer value.
    """
    content, filename, content_type = await read_upload(file, services.settings.max_upload_size_mb)
    key = build_object_key(user["user_id"], filename)
    url = services.storage.upload(content, key, content_type)
    return UploadResponse(message="File uploaded successfully", file_url=url, original_filename=filename)
