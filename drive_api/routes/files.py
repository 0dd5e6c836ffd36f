import logging
from typing import Optional

from fastapi import APIRouter, File as UploadFileParam, Form, UploadFile
from fastapi.responses import FileResponse

from .. import cascade, hierarchy, models, schemas, sharing, storage
from ..auth import CurrentUser, DBDep
from ..errors import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])


def file_read(db_file: models.File) -> schemas.FileRead:
    return schemas.FileRead(
        id=db_file.id,
        name=db_file.name,
        originalName=db_file.original_name,
        sizeBytes=db_file.size_bytes,
        mimeType=db_file.mime_type,
        ownerId=db_file.owner_id,
        folderId=db_file.folder_id,
        isFavorite=db_file.is_favorite,
        isDeleted=db_file.is_deleted,
        deletedAt=db_file.deleted_at,
        isShared=sharing.is_share_active(db_file),
        shareExpiresAt=db_file.share_expires_at,
        createdAt=db_file.created_at,
        updatedAt=db_file.updated_at,
    )


def send_file(db_file: models.File) -> FileResponse:
    if not storage.exists(db_file.storage_path):
        logger.error("Stored bytes missing for file %s", db_file.id)
        raise NotFoundError("File not found")
    return FileResponse(
        db_file.storage_path,
        media_type=db_file.mime_type or "application/octet-stream",
        filename=db_file.original_name,
    )


@router.post("/upload", response_model=schemas.FileRead, status_code=201)
def upload_file(
    current_user: CurrentUser,
    db: DBDep,
    file: UploadFile = UploadFileParam(...),
    name: Optional[str] = Form(None),
    folderId: Optional[str] = Form(None),  # FormData sends "null" for no folder
):
    folder_id = folderId if folderId and folderId != "null" else None
    storage_path, size_bytes = storage.save_upload(current_user.id, file)
    original_name = file.filename or "file"
    try:
        db_file = hierarchy.create_file(
            db,
            owner_id=current_user.id,
            name=name or original_name,
            original_name=original_name,
            storage_path=storage_path,
            size_bytes=size_bytes,
            mime_type=file.content_type,
            folder_id=folder_id,
        )
    except Exception:
        storage.remove(storage_path)
        raise
    return file_read(db_file)


@router.get("", response_model=list[schemas.FileRead])
def list_files(
    current_user: CurrentUser,
    db: DBDep,
    folderId: Optional[str] = None,
    favorite: Optional[bool] = None,
):
    files = hierarchy.list_files(
        db, current_user.id, folder_id=folderId, favorite=favorite
    )
    return [file_read(f) for f in files]


@router.get("/trash", response_model=list[schemas.FileRead])
def list_trashed_files(current_user: CurrentUser, db: DBDep):
    return [file_read(f) for f in hierarchy.list_files(db, current_user.id, deleted=True)]


@router.get("/{file_id}", response_model=schemas.FileRead)
def get_file(file_id: str, current_user: CurrentUser, db: DBDep):
    return file_read(hierarchy.get_owned_file(db, file_id, current_user.id))


@router.patch("/{file_id}", response_model=schemas.FileRead)
def update_file(
    file_id: str,
    patch: schemas.FileUpdate,
    current_user: CurrentUser,
    db: DBDep,
):
    db_file = hierarchy.update_file(
        db, file_id, current_user.id, patch.model_dump(exclude_unset=True)
    )
    return file_read(db_file)


@router.delete("/{file_id}", response_model=schemas.FileRead)
def delete_file(file_id: str, current_user: CurrentUser, db: DBDep):
    return file_read(cascade.soft_delete_file(db, file_id, current_user.id))


@router.post("/{file_id}/restore", response_model=schemas.FileRead)
def restore_file(file_id: str, current_user: CurrentUser, db: DBDep):
    return file_read(cascade.restore_file(db, file_id, current_user.id))


@router.post("/{file_id}/share", response_model=schemas.ShareLink)
def share_file(
    file_id: str,
    current_user: CurrentUser,
    db: DBDep,
    body: Optional[schemas.ShareCreate] = None,
):
    expires_at = body.expiresAt if body else None
    db_file, url = sharing.create_share_link(db, file_id, current_user.id, expires_at)
    return schemas.ShareLink(shareLink=url, expiresAt=db_file.share_expires_at)


@router.delete("/{file_id}/share", response_model=schemas.FileRead)
def unshare_file(file_id: str, current_user: CurrentUser, db: DBDep):
    return file_read(sharing.revoke_share_link(db, file_id, current_user.id))


@router.get("/{file_id}/download")
def download_file(file_id: str, current_user: CurrentUser, db: DBDep):
    return send_file(hierarchy.get_owned_file(db, file_id, current_user.id))
