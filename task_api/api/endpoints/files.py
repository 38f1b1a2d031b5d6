import logging
from typing import Union

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile

from task_api.api import deps
from task_api.core.exceptions import ValidationError
from task_api.services import StorageService, TelemetryService
from task_api.services.storage_service import MAX_UPLOAD_SIZE, validate_upload

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/upload",
    responses={
        400: {"description": "No file, disallowed type or file too large"},
        503: {"description": "Storage not configured"},
    },
)
def upload_file(
    file: Union[UploadFile, str, None] = File(None),
    storage: StorageService = Depends(deps.get_storage_service),
    telemetry: TelemetryService = Depends(deps.get_telemetry),
):
    """
    Upload a single file from the multipart field ``file``.

    Type and size are checked before anything reaches storage.
    """
    # A part sent without a filename arrives as a plain string.
    if not isinstance(file, StarletteUploadFile):
        raise ValidationError("No file uploaded")

    # One byte past the cap is enough to know the file is too large.
    data = file.file.read(MAX_UPLOAD_SIZE + 1)
    validate_upload(file.filename, file.content_type, len(data))

    uploaded = storage.upload_file(file.filename, data, file.content_type)
    logger.info("File uploaded: %s", uploaded.file_name)
    telemetry.track_event(
        "FileUploaded",
        {
            "fileName": uploaded.file_name,
            "contentType": uploaded.content_type,
        },
    )
    telemetry.track_metric("file.upload.size", uploaded.size)
    return {
        "success": True,
        "message": "File uploaded successfully",
        "file": uploaded.to_json(),
    }


@router.get(
    "/files",
    responses={503: {"description": "Storage not configured"}},
)
def list_files(
    storage: StorageService = Depends(deps.get_storage_service),
    telemetry: TelemetryService = Depends(deps.get_telemetry),
):
    """List every uploaded file."""
    files = storage.list_files()
    telemetry.track_event("FilesListed", {"count": len(files)})
    return {
        "success": True,
        "files": [stored.to_json() for stored in files],
        "count": len(files),
    }
