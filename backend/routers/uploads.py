from typing import Optional

from fastapi import APIRouter, Depends, UploadFile, File, HTTPException, Query, status
from fastapi.responses import JSONResponse

from core.auth import current_active_user
from core.errors import PayloadTooLargeError, UnsupportedMediaTypeError
from core.uploads import UploadGateway, get_upload_gateway
from db.database import User

router = APIRouter()


@router.post("")
async def upload_image(
    file: Optional[UploadFile] = File(None),
    uploads: UploadGateway = Depends(get_upload_gateway),
    user: User = Depends(current_active_user),
):
    """
    Store an image on local disk.
    Accepts a multipart ``file`` of type jpeg, png, webp or gif, at most 5MB.
    Returns the public address to serve the image (/uploads/{name}).
    """
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    # Reject on the declared size before buffering; accept() re-checks the bytes.
    if file.size is not None and file.size > uploads.max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(PayloadTooLargeError(file.size, uploads.max_bytes)),
        )

    file_data = await file.read()
    try:
        address = await uploads.accept(file_data, file.content_type, file.filename)
    except UnsupportedMediaTypeError as e:
        raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=str(e))
    except PayloadTooLargeError as e:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e))

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "address": address,
            "name": file.filename,
        },
    )


@router.delete("")
async def delete_image(
    address: str = Query(...),
    uploads: UploadGateway = Depends(get_upload_gateway),
    user: User = Depends(current_active_user),
):
    """Best-effort delete. Acknowledged whether or not the file existed."""
    await uploads.remove(address)
    return {"ok": True}
