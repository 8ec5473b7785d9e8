"""Builders for small real audio files used by the tests"""

import base64
import struct
import wave
from io import BytesIO

from PIL import Image
from mutagen.flac import FLAC, Picture
from mutagen.id3 import APIC, TALB, TIT2, TPE1
from mutagen.ogg import OggPage
from mutagen.wave import WAVE
from mutagen._vorbis import VCommentDict


def write_wav(path, seconds=3.0, sample_rate=8000):
    """Write a mono 16-bit WAV file of silence"""
    frames = int(seconds * sample_rate)
    with wave.open(str(path), 'wb') as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(b'\x00\x00' * frames)
    return path


def tag_wav(path, title=None, artist=None, album=None, pictures=()):
    """Add an ID3 chunk to a WAV file; pictures are (mime, data) pairs"""
    audio = WAVE(str(path))
    audio.add_tags()
    if title is not None:
        audio.tags.add(TIT2(encoding=3, text=[title]))
    if artist is not None:
        audio.tags.add(TPE1(encoding=3, text=[artist]))
    if album is not None:
        audio.tags.add(TALB(encoding=3, text=[album]))
    for index, (mime, data) in enumerate(pictures):
        audio.tags.add(APIC(encoding=3, mime=mime, type=3, desc=f'cover {index}', data=data))
    audio.save()
    return path


def write_flac(path, seconds=3.0, sample_rate=44100):
    """Write a FLAC file holding only a STREAMINFO block"""
    total_samples = int(seconds * sample_rate)
    # 20 bits sample rate, 3 bits channels-1, 5 bits bits-per-sample-1, 36 bits samples
    packed = (sample_rate << 44) | (0 << 41) | (15 << 36) | total_samples
    streaminfo = (
        struct.pack('>HH', 4096, 4096)
        + (0).to_bytes(3, 'big')
        + (0).to_bytes(3, 'big')
        + packed.to_bytes(8, 'big')
        + b'\x00' * 16
    )
    header = bytes([0x80]) + len(streaminfo).to_bytes(3, 'big')
    path.write_bytes(b'fLaC' + header + streaminfo)
    return path


def tag_flac(path, comments=None, pictures=()):
    """Add Vorbis comments and picture blocks to a FLAC file"""
    audio = FLAC(str(path))
    if comments is not None:
        audio.add_tags()
        for key, value in comments.items():
            audio[key] = value
    for mime, data in pictures:
        audio.add_picture(flac_picture(mime, data))
    audio.save()
    return path


def make_image(image_format='JPEG', color=(200, 30, 30)):
    """Encode a tiny image with Pillow"""
    buffer = BytesIO()
    Image.new('RGB', (4, 4), color).save(buffer, format=image_format)
    return buffer.getvalue()


def add_riff_info(path, items):
    """Append a LIST/INFO chunk to a WAV file; items maps chunk ids to text"""
    body = b''
    for chunk_id, text in items.items():
        data = text.encode('utf-8') + b'\x00'
        body += chunk_id.encode('ascii') + struct.pack('<I', len(data)) + data
        if len(data) % 2:
            body += b'\x00'
    list_data = b'INFO' + body

    raw = bytearray(path.read_bytes())
    raw += b'LIST' + struct.pack('<I', len(list_data)) + list_data
    raw[4:8] = struct.pack('<I', len(raw) - 8)
    path.write_bytes(bytes(raw))
    return path


def write_opus(path, seconds=3.0, comments=None, pictures=()):
    """Write an Ogg Opus stream with header pages, a comment page and one audio page"""
    pre_skip = 312
    serial = 0x4F505553

    head = OggPage()
    head.first = True
    head.serial = serial
    head.sequence = 0
    head.packets = [b'OpusHead' + struct.pack('<BBHIhB', 1, 2, pre_skip, 48000, 0, 0)]

    tags = VCommentDict()
    for key, value in (comments or {}).items():
        tags[key] = value
    if pictures:
        tags['METADATA_BLOCK_PICTURE'] = [
            base64.b64encode(flac_picture(mime, data).write()).decode('ascii')
            for mime, data in pictures
        ]
    comment = OggPage()
    comment.serial = serial
    comment.sequence = 1
    comment.packets = [b'OpusTags' + tags.write(framing=False)]

    audio = OggPage()
    audio.last = True
    audio.serial = serial
    audio.sequence = 2
    audio.position = pre_skip + int(seconds * 48000)
    audio.packets = [b'\xfc\xff\xfe']

    path.write_bytes(head.write() + comment.write() + audio.write())
    return path


def flac_picture(mime, data):
    """Front cover picture block"""
    picture = Picture()
    picture.type = 3
    picture.mime = mime
    picture.data = data
    return picture
