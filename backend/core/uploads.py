import logging
import os
import secrets
import time
from typing import Optional

from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.errors import PayloadTooLargeError, UnsupportedMediaTypeError

logger = logging.getLogger(__name__)

CONTENT_TYPE_TO_EXT = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}
ALLOWED_CONTENT_TYPES = frozenset(CONTENT_TYPE_TO_EXT)


class UploadGateway:
    """Stores uploaded images on local disk and hands back public addresses.

    An address looks like ``/uploads/1718000000000_a1b2c3d4e5f6.jpg`` and maps
    to ``<directory>/1718000000000_a1b2c3d4e5f6.jpg``.
    """

    def __init__(self, directory: str, url_prefix: str = "/uploads/", max_bytes: int = 5 * 1024 * 1024):
        self.directory = os.path.abspath(directory)
        self.url_prefix = url_prefix if url_prefix.endswith("/") else url_prefix + "/"
        self.max_bytes = max_bytes

    def _extension_for(self, content_type: str, filename: Optional[str]) -> str:
        ext = CONTENT_TYPE_TO_EXT.get(content_type)
        if ext:
            return ext
        orig_ext = os.path.splitext(filename or "")[1].lower()
        return orig_ext or ".bin"

    def _unique_name(self, ext: str) -> str:
        return f"{int(time.time() * 1000)}_{secrets.token_hex(6)}{ext}"

    def _write(self, name: str, data: bytes) -> None:
        os.makedirs(self.directory, exist_ok=True)
        with open(os.path.join(self.directory, name), "wb") as fh:
            fh.write(data)

    async def accept(self, data: bytes, content_type: Optional[str], filename: Optional[str] = None) -> str:
        """Validate and persist ``data``, returning its address."""
        content_type = (content_type or "").strip().lower()
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise UnsupportedMediaTypeError(content_type)
        if len(data) > self.max_bytes:
            raise PayloadTooLargeError(len(data), self.max_bytes)

        name = self._unique_name(self._extension_for(content_type, filename))
        await run_in_threadpool(self._write, name, data)

        address = f"{self.url_prefix}{name}"
        logger.info("Stored upload %s (%d bytes, %s)", address, len(data), content_type)
        return address

    def is_local(self, address: Optional[str]) -> bool:
        """Only addresses under our prefix, with no traversal, are ours to delete."""
        return bool(address) and address.startswith(self.url_prefix) and ".." not in address

    def path_for(self, address: str) -> str:
        relative = address[len(self.url_prefix):]
        path = os.path.abspath(os.path.join(self.directory, relative))
        if os.path.commonpath([path, self.directory]) != self.directory:
            raise ValueError(f"Address {address!r} escapes the upload directory")
        return path

    async def remove(self, address: Optional[str]) -> None:
        """Best-effort delete. Never raises; failures are only logged."""
        if not self.is_local(address):
            return
        try:
            await run_in_threadpool(os.remove, self.path_for(address))
            logger.info("Removed upload %s", address)
        except FileNotFoundError:
            logger.debug("Upload %s already gone", address)
        except (OSError, ValueError) as e:
            logger.warning("Could not remove upload %s: %r", address, e)


upload_gateway = UploadGateway(
    settings.upload_dir,
    url_prefix=settings.upload_url_prefix,
    max_bytes=settings.upload_max_bytes,
)


def get_upload_gateway() -> UploadGateway:
    return upload_gateway
