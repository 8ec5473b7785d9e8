"""Test configuration and fixtures"""

import pytest

from tests.audio_builders import make_image, tag_flac, tag_wav, write_flac, write_wav


@pytest.fixture
def jpeg_bytes():
    """Small JPEG cover"""
    return make_image('JPEG')


@pytest.fixture
def png_bytes():
    """Small PNG cover"""
    return make_image('PNG', color=(20, 90, 200))


@pytest.fixture
def tagged_wav(tmp_path, jpeg_bytes):
    """3 second WAV with title, artist, album and a JPEG cover"""
    path = write_wav(tmp_path / 'tagged.wav', seconds=3.0)
    return tag_wav(
        path,
        title='Harbour Lights',
        artist='The Tidal Band',
        album='Low Water',
        pictures=[('image/jpeg', jpeg_bytes)]
    )


@pytest.fixture
def tagged_flac(tmp_path, jpeg_bytes):
    """3 second FLAC with Vorbis comments and a JPEG picture block"""
    path = write_flac(tmp_path / 'tagged.flac', seconds=3.0)
    return tag_flac(
        path,
        comments={'TITLE': 'Northern Road', 'ARTIST': 'Kestrel', 'ALBUM': 'Fieldwork'},
        pictures=[('image/jpeg', jpeg_bytes)]
    )
