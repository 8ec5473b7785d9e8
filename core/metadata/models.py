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
Data records shared by the metadata and album art modules
"""
from dataclasses import dataclass, asdict, field
from typing import Any, List, Optional


@dataclass
class AudioMetadata:
    """Display metadata for a single audio file"""
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    duration: Optional[int] = None  # Whole seconds
    cover: Optional[str] = None  # data:<mime>;base64,<payload>

    def to_dict(self):
        """Convert to dictionary for JSON serialization"""
        return asdict(self)


@dataclass
class EmbeddedPicture:
    """Raw picture bytes as stored in a tag block"""
    data: bytes
    mime: Optional[str] = None  # None when the tag format declares no MIME type


@dataclass
class TagBlock:
    """The tag section chosen as the source of text fields and pictures"""
    kind: str  # 'id3', 'vorbis', 'mp4', 'asf', 'apev2' or 'riff_info'
    tags: Any
    # FLAC keeps pictures in their own metadata blocks next to the Vorbis comment
    flac_pictures: List[Any] = field(default_factory=list)
