from __future__ import annotations

import asyncio
import re
from pathlib import Path

import structlog

from helpdesk.core.config import settings
from helpdesk.core.errors import UploadError

logger = structlog.get_logger(__name__)

_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def _check_segment(value: str) -> str:
    if not _SAFE_SEGMENT.match(value) or ".." in value:
        raise UploadError(f"Invalid storage path: {value}")
    return value


class BlobStorage:
    """Bucketed file store on local disk, published under ``STORAGE_PUBLIC_URL``."""

    def __init__(self, root: str | Path | None = None, public_url: str | None = None) -> None:
        self.root = Path(root or settings.STORAGE_DIR)
        self.public_url = (public_url if public_url is not None else settings.STORAGE_PUBLIC_URL).rstrip("/")

    def _target(self, bucket: str, path: str) -> Path:
        return self.root / _check_segment(bucket) / _check_segment(path)

    async def upload(self, bucket: str, path: str, data: bytes) -> str:
        target = self._target(bucket, path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            # "x" refuses to overwrite: uploads never upsert
            with target.open("xb") as handle:
                handle.write(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            logger.error("upload_failed", bucket=bucket, path=path, error=str(exc))
            raise UploadError(f"Failed to upload {path}") from exc
        logger.info("upload_stored", bucket=bucket, path=path, size=len(data))
        return path

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_url}/{_check_segment(bucket)}/{_check_segment(path)}"
