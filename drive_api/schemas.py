from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


# ---------- Users ----------

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = ""


class UserLogin(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: str
    email: str
    name: str
    createdAt: datetime


class AuthResponse(BaseModel):
    user: UserRead
    token: str
    token_type: str = "bearer"


class ForgotPassword(BaseModel):
    email: str


class ResetPassword(BaseModel):
    password: str = Field(min_length=6)


class Message(BaseModel):
    message: str


# ---------- Folders ----------

class FolderCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    parentId: str | None = None

    model_config = ConfigDict(extra="forbid")


class FolderUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)

    model_config = ConfigDict(extra="forbid")


class FolderRead(BaseModel):
    id: str
    name: str
    path: str
    parentId: str | None
    ownerId: str
    isDeleted: bool
    deletedAt: datetime | None
    createdAt: datetime
    updatedAt: datetime


# ---------- Files ----------

class FileUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    folderId: str | None = None
    isFavorite: bool | None = None

    model_config = ConfigDict(extra="forbid")


class FileRead(BaseModel):
    id: str
    name: str
    originalName: str
    sizeBytes: int
    mimeType: str
    ownerId: str
    folderId: str | None
    isFavorite: bool
    isDeleted: bool
    deletedAt: datetime | None
    isShared: bool
    shareExpiresAt: datetime | None
    createdAt: datetime
    updatedAt: datetime


class FolderContentsList(BaseModel):
    subfolders: list[FolderRead]
    files: list[FileRead]


class FolderContents(BaseModel):
    folder: FolderRead
    contents: FolderContentsList


class CascadeRead(BaseModel):
    folder: FolderRead
    foldersAffected: int
    filesAffected: int


# ---------- Sharing ----------

class ShareCreate(BaseModel):
    expiresAt: datetime | None = None

    model_config = ConfigDict(extra="forbid")


class ShareLink(BaseModel):
    shareLink: str
    expiresAt: datetime | None


class SharedFileRead(BaseModel):
    id: str
    name: str
    sizeBytes: int
    mimeType: str
    createdAt: datetime
