from fastapi import APIRouter

from .. import schemas, sharing
from ..auth import DBDep
from .files import send_file

router = APIRouter(prefix="/shared", tags=["shared"])


@router.get("/{token}", response_model=schemas.SharedFileRead)
def get_shared_file(token: str, db: DBDep):
    db_file = sharing.resolve_share_token(db, token)
    return schemas.SharedFileRead(
        id=db_file.id,
        name=db_file.name,
        sizeBytes=db_file.size_bytes,
        mimeType=db_file.mime_type,
        createdAt=db_file.created_at,
    )


@router.get("/{token}/download")
def download_shared_file(token: str, db: DBDep):
    return send_file(sharing.resolve_share_token(db, token))
