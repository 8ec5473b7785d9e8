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
Metadata reading operations for Metadata Probe
Handles extracting display metadata from audio files using Mutagen
"""
from typing import Optional

from config import logger
from core.file_utils import is_valid_audio_path
from core.metadata.models import AudioMetadata
from core.metadata.mutagen_handler import mutagen_handler
from core.album_art.extractor import extract_cover

TEXT_FIELDS = ('title', 'artist', 'album')


def _read_field(filepath, name, read, *args):
    """Run one field reader; a failure only loses that field"""
    try:
        return read(*args)
    except Exception as e:
        logger.error(f"Failed to read {name} from {filepath}: {e}")
        return None


def read_metadata(filepath) -> Optional[AudioMetadata]:
    """
    Read display metadata from an audio file

    Safe to call on unsanitized input: the path is validated first, and an
    invalid path, an unreadable file or an unparseable container all give None.
    Once the container has been probed every field is filled in independently.

    Args:
        filepath: Path to the audio file

    Returns:
        AudioMetadata, or None if no metadata could be read
    """
    if not is_valid_audio_path(filepath):
        logger.debug(f"Not a readable audio file: {filepath!r}")
        return None

    audio_file, format_type = mutagen_handler.detect_format(filepath)
    if audio_file is None:
        return None

    metadata = AudioMetadata(
        duration=_read_field(filepath, 'duration', mutagen_handler.get_duration, audio_file)
    )

    tag_block = _read_field(filepath, 'tags', mutagen_handler.select_tag_block, audio_file, filepath)
    if tag_block is None:
        logger.debug(f"No tag block in {format_type} file {filepath}")
        return metadata

    for field in TEXT_FIELDS:
        value = _read_field(filepath, field, mutagen_handler.read_text_field, tag_block, field)
        setattr(metadata, field, value)
    metadata.cover = _read_field(filepath, 'cover', extract_cover, tag_block)

    return metadata


def get_metadata(path) -> Optional[dict]:
    """
    The get_metadata command: metadata as a JSON-ready dict, or None
    """
    metadata = read_metadata(path)
    if metadata is None:
        return None
    return metadata.to_dict()
