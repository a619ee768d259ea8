"""Stored image lookup with path traversal protection."""

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from fitness_journal.domain.errors import NotFoundError, ValidationError


@dataclass(frozen=True)
class StoredImage:
    content: bytes
    media_type: str


@dataclass
class FilesystemImageStore:
    """Serves files from a single directory; names may not leave it."""

    root: Path

    def resolve(self, filename: str) -> Path:
        """Return the file path inside ``root`` or raise ValidationError."""
        if (
            not isinstance(filename, str)
            or not filename.strip()
            or "/" in filename
            or "\\" in filename
            or "\x00" in filename
            or filename in {".", ".."}
        ):
            raise ValidationError("Invalid image filename")
        root = self.root.resolve()
        candidate = (root / filename).resolve()
        if candidate.parent != root:
            raise ValidationError("Invalid image filename")
        return candidate

    def read(self, filename: str) -> StoredImage:
        path = self.resolve(filename)
        if not path.is_file():
            raise NotFoundError(f"Image {filename} not found")
        media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return StoredImage(content=path.read_bytes(), media_type=media_type)

    def save(self, filename: str, content: bytes) -> str:
        """Write an image and return the public URL path for it."""
        path = self.resolve(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return f"/api/images/{path.name}"
