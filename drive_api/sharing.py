import logging
import secrets
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from . import config, models
from .errors import NotFoundError, ValidationError
from .hierarchy import get_owned_file
from .models import as_utc, utcnow

logger = logging.getLogger(__name__)

# 32 random bytes, 256 bits of entropy
SHARE_TOKEN_BYTES = 32


def share_url(token: str) -> str:
    return f"{config.FRONTEND_URL}/shared/{token}"


def create_share_link(
    db: Session, file_id: str, owner_id: str, expires_at: datetime | None = None
) -> tuple[models.File, str]:
    db_file = get_owned_file(db, file_id, owner_id)
    if expires_at is not None:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= utcnow():
            raise ValidationError("expiresAt must be in the future")

    token = secrets.token_urlsafe(SHARE_TOKEN_BYTES)
    db_file.share_token = token
    db_file.share_expires_at = expires_at
    db.commit()
    db.refresh(db_file)
    logger.info("Share link issued for file %s (expires %s)", db_file.id, expires_at)
    return db_file, share_url(token)


def revoke_share_link(db: Session, file_id: str, owner_id: str) -> models.File:
    db_file = get_owned_file(db, file_id, owner_id)
    db_file.share_token = None
    db_file.share_expires_at = None
    db.commit()
    db.refresh(db_file)
    logger.info("Share link revoked for file %s", db_file.id)
    return db_file


def is_share_active(db_file: models.File) -> bool:
    if db_file.share_token is None:
        return False
    expires_at = as_utc(db_file.share_expires_at)
    return expires_at is None or expires_at > utcnow()


def resolve_share_token(db: Session, token: str) -> models.File:
    """Return the file a share token points at.

    No ownership check happens here: holding the token is the credential.
    """
    db_file = None
    if token:
        db_file = db.scalar(select(models.File).where(models.File.share_token == token))
    if db_file is None or db_file.is_deleted or not is_share_active(db_file):
        raise NotFoundError("Shared file not found")
    return db_file
