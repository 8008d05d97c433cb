"""Best-effort removal of a note's stored images."""

import logging

from django.conf import settings
from django.core.files.storage import default_storage
from typing import Iterable, Optional
from urllib.parse import urlparse, unquote

logger = logging.getLogger(__name__)


def image_key_from_url(url: str) -> Optional[str]:
    """
    Turn a public image URL into a storage key.

    Strips NOTE_IMAGE_URL_PREFIX when the URL starts with it, otherwise
    falls back to the URL path without its leading slash.

    Returns:
        Storage key, or None for an empty/unusable URL
    """
    if not url:
        return None

    prefix = getattr(settings, 'NOTE_IMAGE_URL_PREFIX', '')
    if prefix and url.startswith(prefix):
        key = url[len(prefix):]
    else:
        key = urlparse(url).path

    key = unquote(key).lstrip('/')
    return key or None


def delete_note_images(images: Optional[Iterable[str]]) -> int:
    """
    Delete every image of a note from storage, never raising.

    A missing object, a misconfigured bucket or an unreachable storage
    backend is logged and skipped: note deletion must not depend on it.

    Args:
        images: Image URLs stored on the note (may be None)

    Returns:
        Number of images deleted successfully
    """
    deleted = 0
    for url in images or []:
        key = image_key_from_url(url)
        if key is None:
            continue
        try:
            default_storage.delete(key)
        except Exception:
            logger.warning("Failed to delete note image %s", url, exc_info=True)
            continue
        deleted += 1
    return deleted
