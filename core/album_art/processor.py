"""
Album art processing for Metadata Probe
Handles MIME type resolution for embedded artwork
"""
import re
from io import BytesIO
from typing import Optional

from PIL import Image

from config import COVER_MIME_ALIASES, DEFAULT_COVER_MIME, logger

IMAGE_MIME_PATTERN = re.compile(r'^image/[a-z0-9][a-z0-9.+-]*$')

def normalize_mime_type(mime_type):
    """
    Clean up a MIME type declared by a tag block

    Returns None for an empty or unusable declaration so callers can fall back
    to detection.
    """
    if not mime_type:
        return None

    mime_type = mime_type.strip().strip('\x00')
    if not mime_type:
        return None

    lowered = mime_type.lower()
    if lowered in COVER_MIME_ALIASES:
        return COVER_MIME_ALIASES[lowered]
    if IMAGE_MIME_PATTERN.match(lowered):
        return lowered

    # Unknown bare names and non-image types are left to detection
    logger.debug(f"Ignoring declared picture MIME type {mime_type!r}")
    return None

def identify_image_mime(image_bytes) -> Optional[str]:
    """
    Identify image data with Pillow

    Returns:
        str: MIME type such as 'image/png', or None if Pillow cannot tell
    """
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            image_format = img.format
    except Exception as e:
        logger.debug(f"Could not identify embedded image: {e}")
        return None

    if not image_format:
        return None
    return Image.MIME.get(image_format.upper())

def resolve_cover_mime(picture):
    """
    Decide the MIME type for a picture's data URI

    Declared type first, then Pillow's identification, then DEFAULT_COVER_MIME.
    """
    mime_type = normalize_mime_type(picture.mime)
    if mime_type:
        return mime_type

    return identify_image_mime(picture.data) or DEFAULT_COVER_MIME
