"""Owner-scoped access to folders and files.

Every lookup filters on ``owner_id``; a row owned by someone else is reported
exactly like a missing one.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from . import config, models
from .errors import NotFoundError, ValidationError
from .tree import FolderTree

logger = logging.getLogger(__name__)

FOLDER_UPDATE_FIELDS = {"name": "name"}
FILE_UPDATE_FIELDS = {
    "name": "name",
    "folderId": "folder_id",
    "isFavorite": "is_favorite",
}


def clean_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise ValidationError("Name must not be empty")
    name = name.strip()
    if "/" in name:
        raise ValidationError("Name must not contain '/'")
    return name


def get_owned_folder(
    db: Session, folder_id: str, owner_id: str, deleted: bool | None = None
) -> models.Folder:
    query = select(models.Folder).where(
        models.Folder.id == folder_id, models.Folder.owner_id == owner_id
    )
    if deleted is not None:
        query = query.where(models.Folder.is_deleted.is_(deleted))
    folder = db.scalar(query)
    if folder is None:
        raise NotFoundError("Folder not found in trash" if deleted else "Folder not found")
    return folder


def get_owned_file(
    db: Session, file_id: str, owner_id: str, deleted: bool | None = None
) -> models.File:
    query = select(models.File).where(
        models.File.id == file_id, models.File.owner_id == owner_id
    )
    if deleted is not None:
        query = query.where(models.File.is_deleted.is_(deleted))
    db_file = db.scalar(query)
    if db_file is None:
        raise NotFoundError("File not found in trash" if deleted else "File not found")
    return db_file


def _live_folder(db: Session, folder_id: str, owner_id: str) -> models.Folder:
    folder = get_owned_folder(db, folder_id, owner_id)
    if folder.is_deleted:
        raise ValidationError("Folder is in the trash")
    return folder


# ---------- Folders ----------

def create_folder(
    db: Session, name: str, parent_id: str | None, owner_id: str
) -> models.Folder:
    name = clean_name(name)
    depth = 1
    if parent_id is not None:
        parent = _live_folder(db, parent_id, owner_id)
        depth = FolderTree.load(db, owner_id).depth_of(parent.id) + 1
    if depth > config.MAX_FOLDER_DEPTH:
        raise ValidationError(
            f"Folders cannot be nested deeper than {config.MAX_FOLDER_DEPTH} levels"
        )

    folder = models.Folder(name=name, owner_id=owner_id, parent_id=parent_id)
    db.add(folder)
    db.commit()
    db.refresh(folder)
    logger.info("Folder created: %s (owner %s, depth %d)", folder.id, owner_id, depth)
    return folder


def list_folders(db: Session, owner_id: str, deleted: bool = False) -> list[models.Folder]:
    query = (
        select(models.Folder)
        .where(models.Folder.owner_id == owner_id)
        .where(models.Folder.is_deleted.is_(deleted))
    )
    if deleted:
        query = query.order_by(models.Folder.deleted_at.desc())
    else:
        query = query.order_by(models.Folder.created_at)
    return list(db.scalars(query).all())


def get_folder_contents(
    db: Session, folder_id: str, owner_id: str
) -> tuple[models.Folder, list[models.Folder], list[models.File]]:
    folder = get_owned_folder(db, folder_id, owner_id)
    subfolders = db.scalars(
        select(models.Folder)
        .where(models.Folder.owner_id == owner_id)
        .where(models.Folder.parent_id == folder.id)
        .where(models.Folder.is_deleted.is_(False))
        .order_by(models.Folder.name)
    ).all()
    files = db.scalars(
        select(models.File)
        .where(models.File.owner_id == owner_id)
        .where(models.File.folder_id == folder.id)
        .where(models.File.is_deleted.is_(False))
        .order_by(models.File.name)
    ).all()
    return folder, list(subfolders), list(files)


def _check_fields(changes: dict[str, Any], allowed: dict[str, str]) -> None:
    unknown = sorted(set(changes) - set(allowed))
    if unknown:
        raise ValidationError(f"Invalid updates: {', '.join(unknown)}")


def update_folder(
    db: Session, folder_id: str, owner_id: str, changes: dict[str, Any]
) -> models.Folder:
    _check_fields(changes, FOLDER_UPDATE_FIELDS)
    folder = get_owned_folder(db, folder_id, owner_id)
    if "name" in changes:
        folder.name = clean_name(changes["name"])
    db.commit()
    db.refresh(folder)
    return folder


# ---------- Files ----------

def create_file(
    db: Session,
    owner_id: str,
    name: str,
    original_name: str,
    storage_path: str,
    size_bytes: int,
    mime_type: str | None,
    folder_id: str | None = None,
) -> models.File:
    if folder_id is not None:
        _live_folder(db, folder_id, owner_id)

    db_file = models.File(
        name=clean_name(name),
        original_name=original_name,
        storage_path=storage_path,
        size_bytes=size_bytes,
        mime_type=mime_type or "application/octet-stream",
        owner_id=owner_id,
        folder_id=folder_id,
    )
    db.add(db_file)
    db.commit()
    db.refresh(db_file)
    logger.info("File stored: %s (%d bytes, owner %s)", db_file.id, size_bytes, owner_id)
    return db_file


def list_files(
    db: Session,
    owner_id: str,
    deleted: bool = False,
    folder_id: str | None = None,
    favorite: bool | None = None,
) -> list[models.File]:
    query = (
        select(models.File)
        .where(models.File.owner_id == owner_id)
        .where(models.File.is_deleted.is_(deleted))
    )
    if folder_id is not None:
        query = query.where(models.File.folder_id == folder_id)
    if favorite is not None:
        query = query.where(models.File.is_favorite.is_(favorite))
    if deleted:
        query = query.order_by(models.File.deleted_at.desc())
    else:
        query = query.order_by(models.File.created_at.desc())
    return list(db.scalars(query).all())


def update_file(
    db: Session, file_id: str, owner_id: str, changes: dict[str, Any]
) -> models.File:
    _check_fields(changes, FILE_UPDATE_FIELDS)
    db_file = get_owned_file(db, file_id, owner_id)

    if "name" in changes:
        db_file.name = clean_name(changes["name"])
    if "folderId" in changes:
        folder_id = changes["folderId"]
        if folder_id is not None:
            _live_folder(db, folder_id, owner_id)
        db_file.folder_id = folder_id
    if "isFavorite" in changes:
        if changes["isFavorite"] is None:
            raise ValidationError("isFavorite must be true or false")
        db_file.is_favorite = bool(changes["isFavorite"])

    db.commit()
    db.refresh(db_file)
    return db_file
