"""Soft delete and restore, for single files and whole folder subtrees.

Deleting a folder marks the folder, the files directly inside it and then
every subfolder (and their files) as deleted. Restoring walks the same
subtree and clears the flags on everything it finds, whether an item was
trashed together with the folder or on its own earlier.

By default every folder step is committed on its own, so a failure half way
leaves the steps already taken in place and the caller should re-fetch. With
``atomic=True`` (or ``CASCADE_ATOMIC``) the whole walk is committed once and
rolled back on error.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from . import config, models
from .hierarchy import get_owned_file, get_owned_folder
from .models import utcnow
from .tree import FolderTree

logger = logging.getLogger(__name__)


@dataclass
class CascadeResult:
    folder: models.Folder
    folders: int = 0
    files: int = 0


def _mark(entity, deleted: bool, when: datetime | None) -> None:
    entity.is_deleted = deleted
    entity.deleted_at = when if deleted else None


def _cascade(
    db: Session,
    folder: models.Folder,
    deleted: bool,
    atomic: bool | None,
) -> CascadeResult:
    if atomic is None:
        atomic = config.CASCADE_ATOMIC
    when = utcnow() if deleted else None
    tree = FolderTree.load(db, folder.owner_id)
    result = CascadeResult(folder=folder)

    try:
        for node in tree.walk(folder.id):
            _mark(node, deleted, when)
            result.folders += 1
            files = db.scalars(
                select(models.File)
                .where(models.File.owner_id == folder.owner_id)
                .where(models.File.folder_id == node.id)
            ).all()
            for db_file in files:
                _mark(db_file, deleted, when)
            result.files += len(files)
            if not atomic:
                db.commit()
        if atomic:
            db.commit()
    except Exception:
        db.rollback()
        logger.exception(
            "Cascade %s of folder %s failed after %d folders",
            "delete" if deleted else "restore",
            folder.id,
            result.folders,
        )
        raise

    db.refresh(folder)
    logger.info(
        "Folder %s %s: %d folders, %d files",
        folder.id,
        "deleted" if deleted else "restored",
        result.folders,
        result.files,
    )
    return result


def soft_delete_folder(
    db: Session, folder_id: str, owner_id: str, atomic: bool | None = None
) -> CascadeResult:
    folder = get_owned_folder(db, folder_id, owner_id)
    return _cascade(db, folder, deleted=True, atomic=atomic)


def restore_folder(
    db: Session, folder_id: str, owner_id: str, atomic: bool | None = None
) -> CascadeResult:
    folder = get_owned_folder(db, folder_id, owner_id, deleted=True)
    return _cascade(db, folder, deleted=False, atomic=atomic)


def soft_delete_file(db: Session, file_id: str, owner_id: str) -> models.File:
    db_file = get_owned_file(db, file_id, owner_id)
    _mark(db_file, True, utcnow())
    db.commit()
    db.refresh(db_file)
    logger.info("File %s moved to trash", db_file.id)
    return db_file


def restore_file(db: Session, file_id: str, owner_id: str) -> models.File:
    db_file = get_owned_file(db, file_id, owner_id, deleted=True)
    _mark(db_file, False, None)
    db.commit()
    db.refresh(db_file)
    logger.info("File %s restored", db_file.id)
    return db_file
