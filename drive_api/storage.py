"""Local content store for uploaded bytes.

Only metadata lives in the database; the bytes are written under
``UPLOAD_DIR/<owner_id>/<random><extension>`` and addressed by the path
recorded on the file.
"""

import os
import shutil
from pathlib import Path

from fastapi import UploadFile

from . import config

MAX_SUFFIX_LENGTH = 16


def _stored_name(filename: str | None) -> str:
    # the client name lives in the database; on disk only the extension is kept
    suffix = Path(Path(filename or "").name.strip()).suffix
    if len(suffix) > MAX_SUFFIX_LENGTH or not suffix[1:].isalnum():
        suffix = ""
    return f"{os.urandom(16).hex()}{suffix}"


def save_upload(owner_id: str, upload: UploadFile) -> tuple[str, int]:
    user_dir = Path(config.UPLOAD_DIR) / owner_id
    user_dir.mkdir(parents=True, exist_ok=True)

    path = user_dir / _stored_name(upload.filename)

    with path.open("wb") as buffer:
        shutil.copyfileobj(upload.file, buffer)

    return str(path), path.stat().st_size


def exists(storage_path: str) -> bool:
    return Path(storage_path).is_file()


def remove(storage_path: str) -> None:
    Path(storage_path).unlink(missing_ok=True)
