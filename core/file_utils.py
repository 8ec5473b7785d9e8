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
File system utilities for Metadata Probe
Handles path validation and extension checks
"""
import os

from config import AUDIO_EXTENSIONS, logger

def get_extension(filepath):
    """Get the lowercase file extension without the dot ('' if there is none)"""
    ext = os.path.splitext(os.fspath(filepath))[1]
    return ext[1:].lower()

def is_valid_audio_path(filepath):
    """
    Check that a path points at an existing regular file with an allowed audio extension

    Args:
        filepath: Candidate path, usually given verbatim by the caller

    Returns:
        bool: True if the path may be handed to the metadata extractor
    """
    if not isinstance(filepath, (str, os.PathLike)):
        return False

    try:
        if not filepath or not os.path.isfile(filepath):
            return False
        ext = get_extension(filepath)
    except (OSError, TypeError, ValueError) as e:
        # Embedded NUL bytes, undecodable names and the like
        logger.debug(f"Rejecting path {filepath!r}: {e}")
        return False

    return ext in AUDIO_EXTENSIONS
