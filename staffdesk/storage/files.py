import re
import uuid
from dataclasses import dataclass
from pathlib import Path

from starlette.concurrency import run_in_threadpool

from staffdesk.core.config import settings
from staffdesk.core.errors import NotFoundError, PayloadTooLargeError


_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass
class StoredFile:
    bucket: str
    key: str
    url: str
    size: int


def safe_filename(name: str | None) -> str:
    base = Path(name or "file").name
    cleaned = _UNSAFE.sub("_", base).strip("._")
    return cleaned or "file"


class FileStorage:
    """Bucketed file storage on local disk, published under ``base_url``."""

    def __init__(self, root: str | Path, base_url: str = "/files", max_bytes: int | None = None) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes if max_bytes is not None else settings.MAX_UPLOAD_BYTES

    def path_for(self, bucket: str, key: str) -> Path:
        path = (self.root / bucket / key).resolve()
        if self.root.resolve() not in path.parents:
            raise NotFoundError("File not found")
        return path

    def public_url(self, bucket: str, key: str) -> str:
        return f"{self.base_url}/{bucket}/{key}"

    def _write(self, path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    async def save(self, bucket: str, filename: str | None, content: bytes) -> StoredFile:
        if len(content) > self.max_bytes:
            raise PayloadTooLargeError(f"File exceeds {self.max_bytes} bytes")
        key = f"{uuid.uuid4().hex}_{safe_filename(filename)}"
        await run_in_threadpool(self._write, self.path_for(bucket, key), content)
        return StoredFile(bucket=bucket, key=key, url=self.public_url(bucket, key), size=len(content))

    async def delete(self, bucket: str, key: str) -> None:
        """Remove a stored file; a missing file is not an error."""
        await run_in_threadpool(self.path_for(bucket, key).unlink, missing_ok=True)


def get_file_storage() -> FileStorage:
    return FileStorage(settings.STORAGE_DIR)
