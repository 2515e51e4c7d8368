"""Image downloading and decoding helpers shared by the OCR engines."""

import base64
from dataclasses import dataclass
from io import BytesIO

import discord
import requests
from PIL import Image
from pillow_heif import register_heif_opener

from ocrguard.util.logger import get_logger

logger = get_logger("image_utils")

register_heif_opener()

DEFAULT_MIME_TYPE = "image/png"
MAX_IMAGE_BYTES = 20 * 1024 * 1024  # 20MB safety cap
IMAGE_ATTACHMENT_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".heif", ".heic")


@dataclass(frozen=True, slots=True)
class DownloadedImage:
    """Raw image bytes together with the MIME type reported by the server."""
    content: bytes
    mime_type: str

    def to_data_url(self) -> str:
        """Encode the image as a base64 ``data:`` URL for multimodal chat APIs."""
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def download_image(url: str, timeout: float = 10) -> DownloadedImage:
    """
    Download an image and return its bytes and MIME type.

    This function blocks the calling thread so it should be run through
    ``asyncio.to_thread``. Unlike most helpers here it raises on failure:
    callers are the OCR engines, whose errors are absorbed by the analyzer.

    Raises:
        requests.RequestException: If the request fails or returns an error status.
        ValueError: If the body exceeds ``MAX_IMAGE_BYTES``.
    """
    logger.debug("[DOWNLOAD] Downloading image from %s", url)
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()

    content = response.content
    if len(content) > MAX_IMAGE_BYTES:
        raise ValueError(f"image exceeds max download size ({len(content)} bytes)")

    mime_type = (response.headers.get("content-type") or DEFAULT_MIME_TYPE).split(";", 1)[0].strip()
    logger.debug("[DOWNLOAD] Downloaded %d bytes (%s) from %s", len(content), mime_type, url)
    return DownloadedImage(content=content, mime_type=mime_type or DEFAULT_MIME_TYPE)


def decode_image(content: bytes) -> Image.Image:
    """
    Decode image bytes into an RGB PIL image at full resolution.

    Animated images are reduced to their first frame.

    Raises:
        PIL.UnidentifiedImageError: If the bytes are not a supported image.
    """
    img = Image.open(BytesIO(content))
    img.seek(0)
    return img.convert("RGB")


def is_image_attachment(attachment: discord.Attachment) -> bool:
    """
    Determine if a Discord attachment is an image.

    The content type decides when Discord reports one. Videos also carry
    width and height, so dimensions are not used; without a content type the
    filename extension decides.
    """
    content_type = (attachment.content_type or "").lower()
    if content_type:
        return content_type.startswith("image/")
    filename = (attachment.filename or "").lower()
    return filename.endswith(IMAGE_ATTACHMENT_EXTENSIONS)
