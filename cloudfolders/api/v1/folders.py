"""Folder API endpoints.

Folders are addressed by their materialized path in the URL, e.g.
``GET /api/v1/folders/Reports/2024`` lists the contents of ``Reports/2024``.

Endpoints:
    GET  /api/v1/folders                        Caller's root folders
    POST /api/v1/folders                        Create a folder
    POST /api/v1/folders/delete                 Delete a folder and its subtree
    POST /api/v1/folders/{path}/files           Upload a file into a folder
    POST /api/v1/folders/{path}/files/manual    Register an already stored file
    POST /api/v1/folders/{path}/files/delete    Delete a file from a folder
    GET  /api/v1/folders/{path}                 Resolve a path and list children
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from cloudfolders.api.v1.schemas import (
    CreateFolderRequest,
    DeletedResponse,
    DeleteFileRequest,
    DeleteFolderRequest,
    FileResponse,
    FolderContentsResponse,
    FolderResponse,
    ManualFileRequest,
    RootListingResponse,
    TreeEntryResponse,
)
from cloudfolders.auth.dependencies import get_current_principal, require_owner_session
from cloudfolders.auth.jwt_handler import Principal
from cloudfolders.config import get_settings
from cloudfolders.database import get_db_session
from cloudfolders.errors import InvalidParametersError, NotFoundError, UnauthorizedError
from cloudfolders.models import Folder
from cloudfolders.storage import BlobStorageService, StorageConfig
from cloudfolders.tree import (
    EntityKind,
    create_file,
    create_folder,
    delete_file,
    delete_folder,
    ensure_unique,
    get_file,
    list_children,
    list_roots,
    make_slug,
    resolve_file_by_logical_path,
    resolve_folder_path,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/folders", tags=["folders"])


def get_storage_service() -> BlobStorageService:
    """Blob storage service for the configured backend."""
    return BlobStorageService.from_config(StorageConfig.from_settings(get_settings()))


async def _owned_folder(session: AsyncSession, folder_path: str, principal: Principal) -> Folder:
    folder = await resolve_folder_path(session, folder_path)
    if folder.user_id != principal.user_id:
        raise UnauthorizedError("Unauthorized to access this folder", path=folder.path)
    return folder


@router.get("", response_model=RootListingResponse)
async def list_root_folders(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
) -> RootListingResponse:
    """List the caller's root folders."""
    folders = await list_roots(session, principal.user_id)
    return RootListingResponse(folders=[FolderResponse.model_validate(f) for f in folders])


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder_endpoint(
    request: CreateFolderRequest,
    principal: Principal = Depends(require_owner_session),
    session: AsyncSession = Depends(get_db_session),
) -> FolderResponse:
    """Create a folder at the root or under ``folderId``."""
    folder = await create_folder(session, principal.user_id, request.name, request.folder_id)
    await session.commit()
    return FolderResponse.model_validate(folder)


@router.post("/delete", response_model=DeletedResponse)
async def delete_folder_endpoint(
    request: DeleteFolderRequest,
    principal: Principal = Depends(require_owner_session),
    session: AsyncSession = Depends(get_db_session),
) -> DeletedResponse:
    """Delete a folder with all of its sub-folders and files."""
    await delete_folder(session, request.folder_id, principal.user_id)
    await session.commit()
    return DeletedResponse(id=request.folder_id)


@router.post(
    "/{folder_path:path}/files/manual",
    response_model=FileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_manual_file(
    folder_path: str,
    request: ManualFileRequest,
    principal: Principal = Depends(require_owner_session),
    session: AsyncSession = Depends(get_db_session),
) -> FileResponse:
    """Register a file record for bytes stored outside this service."""
    folder = await _owned_folder(session, folder_path, principal)
    file = await create_file(session, folder.id, request.name, request.physical_ref)
    await session.commit()
    return FileResponse.model_validate(file)


@router.post("/{folder_path:path}/files/delete", response_model=DeletedResponse)
async def delete_file_endpoint(
    folder_path: str,
    request: DeleteFileRequest,
    principal: Principal = Depends(require_owner_session),
    session: AsyncSession = Depends(get_db_session),
) -> DeletedResponse:
    """Delete a file of the addressed folder by id or by name."""
    folder = await _owned_folder(session, folder_path, principal)

    if request.file_id is None and not (request.file_name or "").strip():
        raise InvalidParametersError("Provide fileId or fileName")

    if request.file_id is not None:
        file = await get_file(session, request.file_id)
        if file.folder_id != folder.id:
            raise NotFoundError(
                "File not found in this folder", file_id=request.file_id, path=folder.path
            )
    else:
        file = await resolve_file_by_logical_path(session, folder.path, request.file_name.strip())

    await delete_file(session, file.id)
    await session.commit()
    return DeletedResponse(id=file.id)


@router.post(
    "/{folder_path:path}/files",
    response_model=FileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_file(
    folder_path: str,
    file: UploadFile = File(..., description="File content"),
    principal: Principal = Depends(require_owner_session),
    session: AsyncSession = Depends(get_db_session),
    storage: BlobStorageService = Depends(get_storage_service),
) -> FileResponse:
    """Upload bytes to the blob store and record them in the folder."""
    folder = await _owned_folder(session, folder_path, principal)

    limit = storage.config.max_upload_bytes
    if file.size is not None:
        storage.validate_upload(file.filename or "", file.size)
    # One byte past the limit is enough to reject an oversized body
    data = await file.read(limit + 1)
    name = storage.validate_upload(file.filename or "", len(data))
    # Reject name clashes before the transfer so no blob is orphaned
    await ensure_unique(session, make_slug(name), EntityKind.FILE)

    stored = await storage.store_upload(name, data, file.content_type)
    record = await create_file(session, folder.id, stored.original_name, stored.physical_ref)
    await session.commit()

    logger.info(f"Upload complete: {record.path!r} ({stored.size_bytes} bytes)")
    return FileResponse.model_validate(record)


@router.get("/{folder_path:path}", response_model=FolderContentsResponse)
async def get_folder_contents(
    folder_path: str,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
) -> FolderContentsResponse:
    """Resolve a folder path and list its direct children."""
    folder = await _owned_folder(session, folder_path, principal)
    entries = await list_children(session, folder.id)
    return FolderContentsResponse(
        folder=FolderResponse.model_validate(folder),
        contents=[
            TreeEntryResponse(kind=e.kind.value, id=e.id, name=e.name, path=e.path)
            for e in entries
        ],
    )
