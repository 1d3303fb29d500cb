"""
Contact Upload API Routes.

Provides endpoints for the per-session contact list:
- POST /api/contacts/upload - Import a LinkedIn connections CSV
- GET /api/contacts - List the session's contacts
- DELETE /api/contacts - Clear the session's contacts

Sessions are keyed by the X-Session-Id header ("default" when absent).
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from src.common.logger import get_logger
from src.services.contact_upload_service import ContactUploadService, MSG_READ_ERROR

from ..auth import verify_token
from ..config import settings
from ..models import ClearContactsResponse, ContactListResponse
from ..sessions import SessionStore, get_session_id, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contacts", tags=["contacts"])

upload_service = ContactUploadService()


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/upload",
    dependencies=[Depends(verify_token)],
    summary="Upload contacts CSV",
    description="Replace the session's contacts with the rows of an uploaded CSV",
)
async def upload_contacts(
    file: UploadFile = File(...),
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> JSONResponse:
    """
    Import contacts from a CSV upload.

    Returns 200 with the imported contacts, or 400 with an error
    notification; the session keeps its previous contacts on failure.
    """
    log = get_logger(__name__, session_id=session_id, component="contacts")
    filename = file.filename or ""

    try:
        content = await file.read(settings.max_upload_bytes + 1)
    except Exception as e:
        log.exception(f"Reading upload {filename!r} failed: {e}")
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "read_error",
                     "notifications": [{"level": "error", "message": MSG_READ_ERROR}]},
        )

    if len(content) > settings.max_upload_bytes:
        log.warning(f"Upload {filename!r} exceeds {settings.max_upload_bytes} bytes")
        return JSONResponse(
            status_code=413,
            content={"success": False, "error": "too_large",
                     "notifications": [{"level": "error", "message": "File is too large"}]},
        )

    session = store.get(session_id)
    result = upload_service.upload(filename, content, session)

    if result.success:
        log.info(f"Imported {len(result.contacts)} contacts from {filename}")
    else:
        log.info(f"Upload of {filename!r} rejected: {result.error}")

    return JSONResponse(status_code=200 if result.success else 400, content=result.to_dict())


@router.get(
    "",
    response_model=ContactListResponse,
    dependencies=[Depends(verify_token)],
    summary="List session contacts",
)
async def list_contacts(
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> ContactListResponse:
    contacts = store.get(session_id).contacts
    return ContactListResponse(contacts=contacts, total=len(contacts))


@router.delete(
    "",
    response_model=ClearContactsResponse,
    dependencies=[Depends(verify_token)],
    summary="Clear session contacts",
)
async def clear_contacts(
    session_id: str = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> ClearContactsResponse:
    notification = store.get(session_id).clear()
    get_logger(__name__, session_id=session_id, component="contacts").info("Cleared contacts")
    return ClearContactsResponse(success=True, notifications=[notification.to_dict()])
