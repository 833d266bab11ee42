"""
Avatar image storage.

Uploaded avatars are written to ``<upload_dir>/avatars`` and referenced by
the URL path they are served under (``/uploads/avatars/<file>``).  The
gateway only ever persists that reference string.
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from auth.errors import ValidationError

logger = logging.getLogger(__name__)

AVATAR_URL_PREFIX = "/uploads/avatars"

# Stored files are served back as static content, so only raster image
# suffixes may end up on disk.
IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".heic", ".heif"}
DEFAULT_SUFFIX = ".jpg"


@dataclass(frozen=True)
class AvatarUpload:
    """An uploaded file, already read into memory."""

    filename: Optional[str]
    content_type: Optional[str]
    data: bytes

    def suffix(self) -> str:
        """Image suffix for the stored file; the client's only if it is one."""
        ext = Path(self.filename or "").suffix.lower()
        if ext in IMAGE_SUFFIXES:
            return ext
        guessed = mimetypes.guess_extension(self.content_type or "")
        if guessed in IMAGE_SUFFIXES:
            return guessed
        return DEFAULT_SUFFIX


class AvatarStorage:
    def __init__(self, upload_dir: Path, *, max_bytes: int = 5 * 1024 * 1024) -> None:
        self.directory = Path(upload_dir) / "avatars"
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def check(self, upload: AvatarUpload) -> None:
        errors = []
        content_type = (upload.content_type or "").lower()
        # svg is image/* but can carry script
        if not content_type.startswith("image/") or content_type.startswith("image/svg"):
            errors.append("Only image files are allowed")
        if len(upload.data) > self.max_bytes:
            errors.append(f"Avatar cannot exceed {self.max_bytes // (1024 * 1024)} MB")
        if not upload.data:
            errors.append("Avatar file is empty")
        if errors:
            raise ValidationError(errors=errors)

    def path_for(self, reference: str) -> Optional[Path]:
        """Local file behind an ``avatarUrl`` we issued, else ``None``."""
        prefix = f"{AVATAR_URL_PREFIX}/"
        if not reference.startswith(prefix):
            return None
        name = reference[len(prefix):]
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            return None
        return self.directory / name

    async def save(self, user_id: str, upload: AvatarUpload) -> str:
        """Validate and store ``upload``; returns its ``avatarUrl`` reference."""
        self.check(upload)

        filename = f"avatar-{user_id}-{int(time.time() * 1000)}{upload.suffix()}"
        path = self.directory / filename

        self.ensure_directory()
        await asyncio.to_thread(path.write_bytes, upload.data)
        logger.info("Stored avatar for %s at %s (%d bytes)", user_id, path, len(upload.data))
        return f"{AVATAR_URL_PREFIX}/{filename}"

    async def delete(self, reference: str) -> None:
        """Remove a stored avatar; references we did not issue are ignored."""
        path = self.path_for(reference)
        if path is None:
            return
        await asyncio.to_thread(path.unlink, missing_ok=True)
        logger.info("Removed avatar %s", path)
