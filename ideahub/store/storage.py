"""File storage for idea attachments."""
import logging
import os
import re
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx

from ..errors import RemoteStoreError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def attachment_path(owner_id: str, filename: str) -> str:
    """Build a unique object path ``<owner>/<uuid>-<sanitized name>``."""
    safe_name = _UNSAFE_CHARS.sub("_", os.path.basename(filename)).strip("._") or "file"
    return f"{owner_id}/{uuid.uuid4().hex}-{safe_name}"


class FileStorage(ABC):
    """Binary object storage that issues a URL for each stored file."""

    @abstractmethod
    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store ``content`` under ``path`` and return its public URL."""


class LocalFileStorage(FileStorage):
    """Writes files below a directory that the web app serves statically."""

    def __init__(self, root_dir: str, url_prefix: str = "/files"):
        self.root_dir = Path(root_dir)
        self.url_prefix = url_prefix.rstrip("/")

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        target = self.root_dir / path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            logger.error(f"Error storing file {path}: {e}")
            raise RemoteStoreError(f"Error storing {path}") from e

        logger.info(f"Stored {len(content)} bytes at {target}")
        return f"{self.url_prefix}/{quote(path)}"


class StorageApiFileStorage(FileStorage):
    """Uploads to the hosted backend's object storage API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        bucket: str,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.bucket = bucket
        self.access_token = access_token
        self.timeout = timeout
        self.transport = transport

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{quote(path)}"

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Content-Type": content_type,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/storage/v1/object/{self.bucket}/{quote(path)}",
                    content=content,
                    headers=headers
                )
        except httpx.HTTPError as e:
            logger.error(f"Error uploading {path}: {e}")
            raise RemoteStoreError(f"Error uploading {path}: {e}") from e

        if not response.is_success:
            raise RemoteStoreError(
                f"Upload of {path} failed: {response.text}", status_code=response.status_code
            )
        return self.public_url(path)
