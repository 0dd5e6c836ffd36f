from fastapi import APIRouter

from .. import auth, models, schemas, users
from ..auth import CurrentUser, DBDep

router = APIRouter(prefix="/auth", tags=["auth"])


def user_read(user: models.User) -> schemas.UserRead:
    return schemas.UserRead(
        id=user.id,
        email=user.email,
        name=user.name,
        createdAt=user.created_at,
    )


def _auth_response(user: models.User) -> schemas.AuthResponse:
    return schemas.AuthResponse(
        user=user_read(user),
        token=auth.create_access_token(user.id),
    )


@router.post("/register", response_model=schemas.AuthResponse, status_code=201)
def register(body: schemas.UserCreate, db: DBDep):
    user = users.register_user(db, body.email, body.password, body.name)
    return _auth_response(user)


@router.post("/login", response_model=schemas.AuthResponse)
def login(body: schemas.UserLogin, db: DBDep):
    user = users.authenticate(db, body.email, body.password)
    return _auth_response(user)


@router.post("/forgot-password", response_model=schemas.Message)
def forgot_password(body: schemas.ForgotPassword, db: DBDep):
    users.request_password_reset(db, body.email)
    return schemas.Message(
        message="If that email is registered, a password reset link has been sent"
    )


@router.post("/reset-password/{token}", response_model=schemas.Message)
def reset_password(token: str, body: schemas.ResetPassword, db: DBDep):
    users.reset_password(db, token, body.password)
    return schemas.Message(message="Password has been reset")


@router.get("/me", response_model=schemas.UserRead)
def get_me(current_user: CurrentUser):
    return user_read(current_user)
