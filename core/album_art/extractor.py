# Metadata Probe - Audio metadata extraction service
# Copyright (C) 2025 Dr. William Nelson Leonard
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Album art extraction operations for Metadata Probe
Handles turning embedded artwork into data URIs for the display layer
"""
import base64

from config import logger
from core.album_art.processor import resolve_cover_mime
from core.metadata.mutagen_handler import mutagen_handler

def build_data_uri(image_data, mime_type):
    """Format raw image bytes as a data:<mime>;base64,<payload> string"""
    payload = base64.b64encode(image_data).decode('ascii')
    return f"data:{mime_type};base64,{payload}"

def extract_cover(tag_block):
    """
    Extract the first embedded picture of a tag block

    Args:
        tag_block: TagBlock chosen by the mutagen handler, or None

    Returns:
        str: Data URI of the first picture, or None if there is none
    """
    if tag_block is None:
        return None

    pictures = mutagen_handler.get_pictures(tag_block)
    if not pictures:
        return None

    # Only the first picture is shown, whatever its picture type
    picture = pictures[0]
    mime_type = resolve_cover_mime(picture)
    if len(pictures) > 1:
        logger.debug(f"Ignoring {len(pictures) - 1} additional embedded picture(s)")

    return build_data_uri(picture.data, mime_type)
