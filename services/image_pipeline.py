"""
services/image_pipeline.py
--------------------------
Turns an uploaded Telegram photo into bytes the Images API accepts.

Steps: resolve the largest size to a file path, stream it to a temp
file keyed by its file id, shrink it to fit 1024x1024 in its own format,
then enforce the upload ceiling. Every file created is registered with
the caller's TempFileArena.
"""

import asyncio
import os
from pathlib import Path

from PIL import Image, ImageOps
from telegram import Bot, File
from telegram.error import TelegramError

from ai.openai_images import PreparedImage
from config import IMAGE_TEMP_DIR, JPEG_QUALITY, MAX_IMAGE_DIMENSION, MAX_UPLOAD_BYTES
from models.event import PhotoSize
from utils.errors import DownloadError, PayloadTooLargeError, ResolutionError
from utils.logger import get_logger
from utils.temp_files import TempFileArena

logger = get_logger(__name__)

_MIME_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}


def fit_inside(path: Path, max_dimension: int = MAX_IMAGE_DIMENSION,
               quality: int = JPEG_QUALITY) -> str:
    """
    Shrink an image in place to fit a square box, keeping aspect ratio.

    The image is re-encoded in its original format. Smaller images are
    never enlarged.

    Returns:
        The Pillow format name of the file, e.g. "JPEG".
    """
    resized_path = path.with_name(path.name + ".resized")
    with Image.open(path) as original:
        image_format = original.format or "JPEG"
        image = ImageOps.exif_transpose(original)
        image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
        if image_format == "JPEG" and image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        image.save(resized_path, format=image_format, quality=quality)
    os.replace(resized_path, path)
    return image_format


class ImagePipeline:
    """Download, normalise and validate a photo for the edit endpoint."""

    def __init__(self, bot: Bot, temp_dir: str = IMAGE_TEMP_DIR,
                 max_bytes: int = MAX_UPLOAD_BYTES):
        self.bot = bot
        self.temp_dir = Path(temp_dir)
        self.max_bytes = max_bytes

    async def resolve(self, photo: PhotoSize) -> File:
        """
        Look up file metadata for a photo size.

        Raises:
            ResolutionError: If Telegram returns no downloadable path.
        """
        file = await self.bot.get_file(photo.file_id)
        if not file.file_path:
            raise ResolutionError("Could not get file path")
        return file

    async def download(self, file: File, arena: TempFileArena) -> Path:
        """
        Stream a resolved file to ``<temp_dir>/<file_id>.jpg``.

        Raises:
            DownloadError: If the transfer fails.
        """
        path = arena.register(self.temp_dir / f"{file.file_id}.jpg")
        try:
            await file.download_to_drive(custom_path=path)
        except (TelegramError, OSError) as e:
            raise DownloadError(f"Could not download the photo: {e}") from e
        logger.info(f"Downloaded {file.file_id} to {path}")
        return path

    async def resize(self, path: Path, arena: TempFileArena) -> str:
        """Fit the file inside the size box. Returns its image format."""
        arena.register(path.with_name(path.name + ".resized"))
        return await asyncio.to_thread(fit_inside, path)

    def check_size(self, path: Path) -> int:
        """
        Enforce the upload ceiling.

        Raises:
            PayloadTooLargeError: If the file is not strictly below the limit.
        """
        size = path.stat().st_size
        if size >= self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise PayloadTooLargeError(
                f"Image is too large (must be less than {limit_mb}MB)"
            )
        return size

    async def prepare(self, photos: list[PhotoSize], arena: TempFileArena) -> PreparedImage:
        """
        Run every step on the largest photo size.

        Args:
            photos: Size variants, smallest to largest.
            arena: Owner of every temp file created.

        Returns:
            The validated image bytes with name and MIME type.
        """
        file = await self.resolve(photos[-1])
        path = await self.download(file, arena)
        image_format = await self.resize(path, arena)
        size = self.check_size(path)
        logger.info(f"Prepared {file.file_id}: {image_format}, {size} bytes")

        mime_type = _MIME_TYPES.get(image_format, "image/jpeg")
        extension = mime_type.split("/")[-1].replace("jpeg", "jpg")
        return PreparedImage(
            filename=f"image.{extension}",
            content=path.read_bytes(),
            mime_type=mime_type,
        )
