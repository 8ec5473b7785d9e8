
"""
Centralized Mutagen operations for Metadata Probe
Handles container probing, tag block selection and raw tag access

This module uses Mutagen (https://github.com/quodlibet/mutagen)
Licensed under LGPL-2.1+ for audio metadata operations.
"""

import base64
import binascii
import math
import struct
from typing import Any, Dict, List, Optional, Tuple

from mutagen import File, MutagenError
from mutagen.mp3 import MP3
from mutagen.id3 import ID3
from mutagen.oggvorbis import OggVorbis
from mutagen.oggopus import OggOpus
from mutagen.flac import FLAC, Picture
from mutagen.mp4 import MP4, MP4Cover, MP4Tags
from mutagen.asf import ASF, ASFTags
from mutagen.aac import AAC
from mutagen.wave import WAVE
from mutagen.apev2 import APEv2, BINARY, TEXT
from mutagen._riff import RiffFile
from mutagen._vorbis import VCommentDict

from config import logger
from core.metadata.models import EmbeddedPicture, TagBlock


class MutagenHandler:
    """Centralized handler for all Mutagen read operations"""

    def __init__(self):
        # Text field keys per tag block kind
        self.tag_mappings = {
            'id3': {  # MP3, WAV, AIFF and ID3-prefixed AAC
                'title': 'TIT2',
                'artist': 'TPE1',
                'album': 'TALB'
            },
            'vorbis': {  # FLAC, OGG Vorbis, Opus (keys are case-insensitive)
                'title': 'title',
                'artist': 'artist',
                'album': 'album'
            },
            'mp4': {  # MP4/M4A atoms
                'title': '\xa9nam',
                'artist': '\xa9ART',
                'album': '\xa9alb'
            },
            'asf': {  # WMA
                'title': 'Title',
                'artist': 'Author',
                'album': 'WM/AlbumTitle'
            },
            'apev2': {  # WavPack, Musepack, APE-tagged MP3/AAC
                'title': 'Title',
                'artist': 'Artist',
                'album': 'Album'
            },
            'riff_info': {  # WAV LIST/INFO chunk
                'title': 'INAM',
                'artist': 'IART',
                'album': 'IPRD'
            }
        }

        # Order in which a tag object's class decides the block kind
        self.tag_kinds = (
            (ID3, 'id3'),
            (VCommentDict, 'vorbis'),
            (MP4Tags, 'mp4'),
            (ASFTags, 'asf'),
            (APEv2, 'apev2')
        )

        # Readers tried, in this order, when the container carries no primary tag
        self.fallback_readers = (
            ('id3', ID3),
            ('apev2', APEv2)
        )

        # APEv2 picture items, front cover first
        self.ape_cover_keys = ('Cover Art (Front)',)

    def detect_format(self, filepath: str) -> Tuple[Optional[Any], str]:
        """
        Probe the container by content and return the Mutagen file object

        Returns:
            Tuple of (Mutagen FileType or None, format string)
        """
        try:
            audio_file = File(filepath)
        except (MutagenError, OSError) as e:
            logger.warning(f"Could not probe {filepath}: {e}")
            return None, 'unknown'
        except Exception as e:
            # Several parsers raise plain ValueError/struct.error on damaged input
            logger.error(f"Unexpected error probing {filepath}: {e}")
            return None, 'unknown'

        if audio_file is None:
            logger.warning(f"Unsupported container format for {filepath}")
            return None, 'unknown'

        format_map = {
            MP3: 'mp3',
            OggVorbis: 'ogg',
            OggOpus: 'ogg',
            FLAC: 'flac',
            MP4: 'mp4',
            ASF: 'asf',
            AAC: 'aac',
            WAVE: 'wav'
        }

        format_type = 'other'
        for file_type, format_name in format_map.items():
            if isinstance(audio_file, file_type):
                format_type = format_name
                break

        return audio_file, format_type

    def get_tag_kind(self, tags) -> Optional[str]:
        """Map a Mutagen tag object to one of the supported block kinds"""
        for tag_class, kind in self.tag_kinds:
            if isinstance(tags, tag_class):
                return kind
        return None

    def select_tag_block(self, audio_file, filepath: str) -> Optional[TagBlock]:
        """
        Choose the tag block that text fields and pictures are read from

        The primary block is the RIFF INFO chunk for WAV files that carry a
        title, artist or album there, and the one Mutagen attaches to the
        probed container for everything else. A WAV carrying both INFO and an
        ID3 chunk is therefore read from INFO. Without a primary block, a
        FLAC file that still carries picture blocks gets an empty Vorbis block
        holding those pictures; otherwise ID3v2 and then APEv2 are read
        straight from the file and the first one found wins.

        Returns:
            TagBlock or None if the file has no readable tags at all
        """
        if isinstance(audio_file, WAVE):
            info_tags = self.read_riff_info(filepath)
            # An INFO chunk with only software/date items does not count as tags
            if any(key in info_tags for key in self.tag_mappings['riff_info'].values()):
                return TagBlock(kind='riff_info', tags=info_tags)

        flac_pictures = list(getattr(audio_file, 'pictures', None) or [])

        tags = audio_file.tags
        if tags is not None:
            kind = self.get_tag_kind(tags)
            if kind is not None:
                return TagBlock(kind=kind, tags=tags, flac_pictures=flac_pictures)
            logger.debug(f"Ignoring unsupported tag type {type(tags).__name__} in {filepath}")

        if flac_pictures:
            return TagBlock(kind='vorbis', tags=VCommentDict(), flac_pictures=flac_pictures)

        for kind, reader in self.fallback_readers:
            try:
                return TagBlock(kind=kind, tags=reader(filepath))
            except (MutagenError, OSError):
                continue
            except Exception as e:
                logger.warning(f"Error reading fallback {kind} tags from {filepath}: {e}")
                continue

        return None

    def read_riff_info(self, filepath: str) -> Dict[str, str]:
        """
        Read the text items of a WAV file's LIST/INFO chunk

        Returns:
            Dict of chunk id (e.g. 'INAM') to text, empty if there is no INFO chunk
        """
        try:
            with open(filepath, 'rb') as fileobj:
                riff_file = RiffFile(fileobj)
                for chunk in riff_file.root.subchunks():
                    if chunk.id == 'LIST' and chunk.name == 'INFO':
                        return self._parse_riff_info(chunk)
        except (MutagenError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read RIFF INFO from {filepath}: {e}")
        return {}

    def _parse_riff_info(self, list_chunk) -> Dict[str, str]:
        info_tags = {}
        for item in list_chunk.subchunks():
            # Values are NUL-terminated; the first item with a given id wins
            raw = item.read().split(b'\x00', 1)[0]
            try:
                text = raw.decode('utf-8')
            except UnicodeDecodeError:
                text = raw.decode('latin-1')
            info_tags.setdefault(item.id, text)
        return info_tags

    def get_duration(self, audio_file) -> Optional[int]:
        """Stream length in whole seconds, rounded down"""
        info = getattr(audio_file, 'info', None)
        length = getattr(info, 'length', None)
        if length is None:
            return None

        try:
            length = float(length)
        except (TypeError, ValueError):
            return None

        if not math.isfinite(length) or length < 0:
            return None
        return int(length)

    def read_text_field(self, block: TagBlock, field: str) -> Optional[str]:
        """
        Read the first value of a text field from a tag block

        Returns:
            The value ('' if present but empty), or None if the field is absent
        """
        key = self.tag_mappings.get(block.kind, {}).get(field)
        if key is None:
            return None

        tags = block.tags

        if block.kind == 'id3':
            frames = tags.getall(key)
            if not frames:
                return None
            text = getattr(frames[0], 'text', None)
            return str(text[0]) if text else ''

        if block.kind == 'apev2':
            if key not in tags:
                return None
            value = tags[key]
            if value.kind != TEXT:
                return None
            return value[0]

        # Vorbis, MP4 and ASF all map a key to a list of values
        if key not in tags:
            return None
        values = tags[key]
        if not isinstance(values, list):
            values = [values]
        if not values:
            return ''

        value = values[0]
        if block.kind == 'asf':
            return str(value.value) if hasattr(value, 'value') else str(value)
        return str(value)

    def get_pictures(self, block: TagBlock) -> List[EmbeddedPicture]:
        """
        Collect the pictures embedded in a tag block, in storage order

        Pictures whose structure cannot be decoded are skipped.
        """
        readers = {
            'id3': self._get_id3_pictures,
            'vorbis': self._get_vorbis_pictures,
            'mp4': self._get_mp4_pictures,
            'asf': self._get_asf_pictures,
            'apev2': self._get_apev2_pictures
        }
        reader = readers.get(block.kind)
        if reader is None:
            return []
        return reader(block)

    def _get_id3_pictures(self, block: TagBlock) -> List[EmbeddedPicture]:
        # Frames keep file order; ID3v2.2 PIC frames are upgraded to APIC on load.
        # A '-->' MIME marks a frame that holds a URL instead of image data.
        return [
            EmbeddedPicture(data=bytes(apic.data), mime=apic.mime or None)
            for apic in block.tags.getall('APIC')
            if apic.mime.strip() != '-->'
        ]

    def _get_vorbis_pictures(self, block: TagBlock) -> List[EmbeddedPicture]:
        pictures = [
            EmbeddedPicture(data=bytes(pic.data), mime=pic.mime or None)
            for pic in block.flac_pictures
        ]

        tags = block.tags
        if 'metadata_block_picture' in tags:
            for encoded in tags['metadata_block_picture']:
                try:
                    pic = Picture(base64.b64decode(encoded))
                except (binascii.Error, struct.error, ValueError, MutagenError) as e:
                    logger.warning(f"Failed to parse METADATA_BLOCK_PICTURE: {e}")
                    continue
                pictures.append(EmbeddedPicture(data=bytes(pic.data), mime=pic.mime or None))

        # Legacy unofficial field, only consulted when no picture block exists
        if not pictures and 'coverart' in tags:
            mimes = tags['coverartmime'] if 'coverartmime' in tags else []
            for index, encoded in enumerate(tags['coverart']):
                try:
                    data = base64.b64decode(encoded)
                except (binascii.Error, ValueError) as e:
                    logger.warning(f"Failed to decode COVERART: {e}")
                    continue
                mime = mimes[index] if index < len(mimes) else None
                pictures.append(EmbeddedPicture(data=data, mime=mime or None))

        return pictures

    def _get_mp4_pictures(self, block: TagBlock) -> List[EmbeddedPicture]:
        covers = block.tags.get('covr') or []
        pictures = []
        for cover in covers:
            imageformat = getattr(cover, 'imageformat', None)
            if imageformat == MP4Cover.FORMAT_PNG:
                mime = 'image/png'
            elif imageformat == MP4Cover.FORMAT_JPEG:
                mime = 'image/jpeg'
            else:
                mime = None
            pictures.append(EmbeddedPicture(data=bytes(cover), mime=mime))
        return pictures

    def _get_asf_pictures(self, block: TagBlock) -> List[EmbeddedPicture]:
        tags = block.tags
        if 'WM/Picture' not in tags:
            return []

        pictures = []
        for attribute in tags['WM/Picture']:
            try:
                mime, data = self._parse_asf_picture(attribute.value)
            except (ValueError, struct.error, AttributeError, UnicodeDecodeError) as e:
                logger.warning(f"Failed to parse WM/Picture: {e}")
                continue
            pictures.append(EmbeddedPicture(data=data, mime=mime or None))
        return pictures

    def _get_apev2_pictures(self, block: TagBlock) -> List[EmbeddedPicture]:
        tags = block.tags
        keys = [key for key in self.ape_cover_keys if key in tags]
        keys.extend(
            key for key in sorted(tags.keys())
            if key.lower().startswith('cover art (')
            and key.lower() not in (k.lower() for k in keys)
        )

        pictures = []
        for key in keys:
            value = tags[key]
            if value.kind != BINARY:
                continue
            # Payload is "<description>\0<image bytes>"
            _, sep, data = value.value.partition(b'\x00')
            if not sep or not data:
                continue
            pictures.append(EmbeddedPicture(data=data, mime=None))
        return pictures

    def _parse_asf_picture(self, data: bytes) -> Tuple[str, bytes]:
        """Parse a WM/Picture attribute into (mime type, image data)"""
        # Type(1) + data length LE32(4) + UTF-16LE mime\0\0 + UTF-16LE desc\0\0 + data
        if len(data) < 9:
            raise ValueError("Invalid WM/Picture: too short")

        size = struct.unpack_from('<I', data, 1)[0]
        offset = 5

        strings = []
        for _ in range(2):
            end = offset
            while True:
                if end + 1 >= len(data):
                    raise ValueError("Invalid WM/Picture: unterminated string")
                if data[end:end + 2] == b'\x00\x00':
                    break
                end += 2
            strings.append(data[offset:end].decode('utf-16-le'))
            offset = end + 2

        image_data = data[offset:offset + size]
        if len(image_data) != size:
            raise ValueError("Invalid WM/Picture: truncated image data")
        return strings[0], image_data


# Global instance
mutagen_handler = MutagenHandler()
