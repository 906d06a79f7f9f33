"""File API endpoints.

Endpoints:
    GET /api/v1/files/{file_id}   Redirect to the stored bytes
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cloudfolders.auth.dependencies import get_current_principal
from cloudfolders.auth.jwt_handler import Principal
from cloudfolders.database import get_db_session
from cloudfolders.errors import UnauthorizedError
from cloudfolders.tree import get_file, get_folder

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/{file_id}", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
async def open_file(
    file_id: int,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    """Redirect to the file's physical reference."""
    file = await get_file(session, file_id)
    folder = await get_folder(session, file.folder_id)
    if folder.user_id != principal.user_id:
        raise UnauthorizedError("Unauthorized to access this file", file_id=file_id)

    return RedirectResponse(file.physical_ref, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
