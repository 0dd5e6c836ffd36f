from fastapi import APIRouter

from .. import cascade, hierarchy, models, schemas
from ..auth import CurrentUser, DBDep
from ..tree import FolderTree
from .files import file_read

router = APIRouter(prefix="/folders", tags=["folders"])


def folder_read(folder: models.Folder, tree: FolderTree) -> schemas.FolderRead:
    return schemas.FolderRead(
        id=folder.id,
        name=folder.name,
        path=tree.path_of(folder.id),
        parentId=folder.parent_id,
        ownerId=folder.owner_id,
        isDeleted=folder.is_deleted,
        deletedAt=folder.deleted_at,
        createdAt=folder.created_at,
        updatedAt=folder.updated_at,
    )


def _cascade_read(db, result: cascade.CascadeResult) -> schemas.CascadeRead:
    tree = FolderTree.load(db, result.folder.owner_id)
    return schemas.CascadeRead(
        folder=folder_read(result.folder, tree),
        foldersAffected=result.folders,
        filesAffected=result.files,
    )


@router.post("", response_model=schemas.FolderRead, status_code=201)
def create_folder(body: schemas.FolderCreate, current_user: CurrentUser, db: DBDep):
    folder = hierarchy.create_folder(db, body.name, body.parentId, current_user.id)
    return folder_read(folder, FolderTree.load(db, current_user.id))


@router.get("", response_model=list[schemas.FolderRead])
def list_folders(current_user: CurrentUser, db: DBDep):
    tree = FolderTree.load(db, current_user.id)
    return [
        folder_read(folder, tree)
        for folder in hierarchy.list_folders(db, current_user.id)
    ]


@router.get("/trash", response_model=list[schemas.FolderRead])
def list_trashed_folders(current_user: CurrentUser, db: DBDep):
    tree = FolderTree.load(db, current_user.id)
    return [
        folder_read(folder, tree)
        for folder in hierarchy.list_folders(db, current_user.id, deleted=True)
    ]


@router.get("/{folder_id}", response_model=schemas.FolderContents)
def get_folder(folder_id: str, current_user: CurrentUser, db: DBDep):
    folder, subfolders, files = hierarchy.get_folder_contents(
        db, folder_id, current_user.id
    )
    tree = FolderTree.load(db, current_user.id)
    return schemas.FolderContents(
        folder=folder_read(folder, tree),
        contents=schemas.FolderContentsList(
            subfolders=[folder_read(sub, tree) for sub in subfolders],
            files=[file_read(f) for f in files],
        ),
    )


@router.patch("/{folder_id}", response_model=schemas.FolderRead)
def update_folder(
    folder_id: str,
    patch: schemas.FolderUpdate,
    current_user: CurrentUser,
    db: DBDep,
):
    folder = hierarchy.update_folder(
        db, folder_id, current_user.id, patch.model_dump(exclude_unset=True)
    )
    return folder_read(folder, FolderTree.load(db, current_user.id))


@router.delete("/{folder_id}", response_model=schemas.CascadeRead)
def delete_folder(folder_id: str, current_user: CurrentUser, db: DBDep):
    result = cascade.soft_delete_folder(db, folder_id, current_user.id)
    return _cascade_read(db, result)


@router.post("/{folder_id}/restore", response_model=schemas.CascadeRead)
def restore_folder(folder_id: str, current_user: CurrentUser, db: DBDep):
    result = cascade.restore_folder(db, folder_id, current_user.id)
    return _cascade_read(db, result)
