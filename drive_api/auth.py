import logging
from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import config, models
from .database import get_db
from .errors import AuthenticationError
from .models import utcnow

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=config.PASSWORD_HASH_ROUNDS,
)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

DBDep = Annotated[Session, Depends(get_db)]


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)


def dummy_verify() -> None:
    # keeps the unknown-email path as slow as a real password check
    pwd_context.dummy_verify()


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(days=config.ACCESS_TOKEN_EXPIRE_DAYS)
    now = utcnow()
    payload = {"sub": user_id, "iat": now, "exp": now + expires_delta}
    return jwt.encode(payload, config.SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried by ``token``.

    ``jwt.decode`` checks the signature and the ``exp`` claim, which must be
    present.
    """
    try:
        payload = jwt.decode(
            token,
            config.SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            options={"require_exp": True},
        )
    except JWTError as exc:
        raise AuthenticationError() from exc
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise AuthenticationError()
    return user_id


def get_current_user(
    db: DBDep,
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> models.User:
    if not token:
        raise AuthenticationError("Not authenticated")
    user_id = decode_access_token(token)
    user = db.get(models.User, user_id)
    if user is None:
        logger.warning("Bearer token for unknown user %s", user_id)
        raise AuthenticationError()
    return user


CurrentUser = Annotated[models.User, Depends(get_current_user)]
