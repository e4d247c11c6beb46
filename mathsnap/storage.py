"""
Image storage for rendered formulas.

Each image gets a random UUID file name under the public image directory
and is referenced by a relative URL. Nothing here deletes images.
"""

import asyncio
import logging
import uuid
from pathlib import Path

from config.constants import IMAGE_EXTENSION

logger = logging.getLogger(__name__)


class ImageStore:
    """Writes PNG bytes to ``image_dir`` and returns their public URL"""

    def __init__(self, image_dir: Path, url_prefix: str = "/images"):
        self.image_dir = Path(image_dir)
        self.url_prefix = url_prefix.rstrip("/")

    async def save(self, data: bytes) -> str:
        """
        Persist one image.

        Args:
            data: PNG bytes

        Returns:
            URL such as "/images/3f2b....png"
        """
        file_name = f"{uuid.uuid4()}{IMAGE_EXTENSION}"
        path = self.image_dir / file_name
        await asyncio.to_thread(self._write, path, data)
        logger.debug(f"Saved formula image {path} ({len(data)} bytes)")
        return f"{self.url_prefix}/{file_name}"

    def _write(self, path: Path, data: bytes) -> None:
        self.image_dir.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
