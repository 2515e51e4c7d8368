"""Collect the image URLs of a Discord message: attachments plus image links in its text."""

import asyncio
import re
from typing import List
from urllib.parse import urlsplit

import discord
import requests

from ocrguard.datatypes.image_datatypes import ImageURL
from ocrguard.util.image_utils import is_image_attachment
from ocrguard.util.logger import get_logger

logger = get_logger("media_extractor")

URL_PATTERN = re.compile(r"https?://\S+")
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp", ".gif")
DEFAULT_PROBE_TIMEOUT = 10.0


def find_urls(content: str | None) -> List[str]:
    """Return every http(s) URL in ``content`` in text order."""
    return URL_PATTERN.findall(content or "")


def has_scannable_content(message: discord.Message) -> bool:
    """Cheap pre-check: the message has attachments or at least one URL in its text."""
    return bool(message.attachments) or URL_PATTERN.search(message.content or "") is not None


def has_image_extension(url: str) -> bool:
    return ImageURL(url).path.lower().endswith(IMAGE_EXTENSIONS)


def probe_image_url(url: str, timeout: float = DEFAULT_PROBE_TIMEOUT) -> bool:
    """
    Send a HEAD request and report whether the URL serves an image.

    Blocks the calling thread. Network errors are logged at debug level and
    reported as "not an image".
    """
    try:
        response = requests.head(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as exc:
        logger.debug("[MEDIA] HEAD failed for %s: %s", url, exc)
        return False
    content_type = (response.headers.get("content-type") or "").lower()
    return response.ok and content_type.startswith("image/")


async def extract_image_urls(message: discord.Message, probe_timeout: float = DEFAULT_PROBE_TIMEOUT) -> List[str]:
    """
    Return the image URLs referenced by a message.

    Order: text links with an image extension, then image attachments, then
    text links confirmed by a HEAD probe. Probes run concurrently in worker
    threads; their results keep text order.

    Args:
        message: The Discord message to inspect.
        probe_timeout: Timeout in seconds for each HEAD probe.

    Returns:
        List of image URL strings (possibly empty).
    """
    direct_links: List[str] = []
    probe_candidates: List[str] = []

    for url in find_urls(message.content):
        try:
            host = urlsplit(url).netloc
        except ValueError:
            host = ""
        if not host:
            logger.debug("[MEDIA] Skipping unparsable URL %s", url)
            continue
        if has_image_extension(url):
            direct_links.append(url)
        else:
            probe_candidates.append(url)

    attachment_urls = [attachment.url for attachment in message.attachments if is_image_attachment(attachment)]

    probed_links: List[str] = []
    if probe_candidates:
        verdicts = await asyncio.gather(
            *(asyncio.to_thread(probe_image_url, url, probe_timeout) for url in probe_candidates)
        )
        probed_links = [url for url, is_image in zip(probe_candidates, verdicts) if is_image]

    image_urls = direct_links + attachment_urls + probed_links
    logger.debug("[MEDIA] Message %s references %d image(s)", message.id, len(image_urls))
    return image_urls
