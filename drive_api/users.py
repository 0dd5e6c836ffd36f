import hashlib
import logging
import secrets
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import auth, config, mailer, models
from .errors import AuthenticationError, ConflictError, ValidationError
from .models import as_utc, utcnow

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def get_user_by_email(db: Session, email: str) -> models.User | None:
    return db.scalar(
        select(models.User).where(models.User.email == normalize_email(email))
    )


def register_user(db: Session, email: str, password: str, name: str = "") -> models.User:
    if get_user_by_email(db, email) is not None:
        raise ConflictError("Email already registered")

    user = models.User(
        email=normalize_email(email),
        name=name.strip(),
        hashed_password=auth.get_password_hash(password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # lost a race with a concurrent registration of the same email
        db.rollback()
        raise ConflictError("Email already registered") from exc
    db.refresh(user)
    logger.info("User registered: %s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> models.User:
    user = get_user_by_email(db, email)
    if user is None:
        auth.dummy_verify()
        logger.warning("Failed login attempt")
        raise AuthenticationError("Invalid credentials")
    if not auth.verify_password(password, user.hashed_password):
        logger.warning("Failed login attempt for user %s", user.id)
        raise AuthenticationError("Invalid credentials")
    return user


def request_password_reset(db: Session, email: str) -> None:
    """Issue a reset token and mail it out.

    Unknown addresses are accepted silently so the response never tells a
    caller whether an account exists.
    """
    user = get_user_by_email(db, email)
    if user is None:
        logger.info("Password reset requested for unknown email")
        return

    token = secrets.token_hex(32)
    user.reset_token_hash = _hash_reset_token(token)
    user.reset_token_expires_at = utcnow() + timedelta(
        minutes=config.RESET_TOKEN_EXPIRE_MINUTES
    )
    db.commit()

    mailer.send_password_reset(user.email, f"{config.FRONTEND_URL}/reset-password/{token}")
    logger.info("Password reset requested for user %s", user.id)


def reset_password(db: Session, token: str, new_password: str) -> models.User:
    user = db.scalar(
        select(models.User).where(
            models.User.reset_token_hash == _hash_reset_token(token)
        )
    )
    if user is None:
        logger.warning("Password reset with unknown token")
        raise ValidationError("Password reset token is invalid or has expired")

    expires_at = as_utc(user.reset_token_expires_at)
    if expires_at is None or expires_at <= utcnow():
        user.reset_token_hash = None
        user.reset_token_expires_at = None
        db.commit()
        logger.warning("Password reset with expired token for user %s", user.id)
        raise ValidationError("Password reset token is invalid or has expired")

    user.hashed_password = auth.get_password_hash(new_password)
    user.reset_token_hash = None
    user.reset_token_expires_at = None
    db.commit()
    db.refresh(user)
    logger.info("Password reset completed for user %s", user.id)
    return user
