"""
Configuration and constants for Metadata Probe
"""
import os

# Server configuration
PORT = int(os.environ.get('PORT', '8338'))
HOST = os.environ.get('HOST', '0.0.0.0')

# Supported audio formats (lowercase, without the leading dot)
AUDIO_EXTENSIONS = frozenset((
    'mp3', 'm4a', 'flac', 'wav', 'ogg', 'opus', 'aac', 'wma'
))

# Cover art handling
DEFAULT_COVER_MIME = 'image/jpeg'

# Short picture format names found in old ID3v2.2 PIC frames and sloppy taggers
COVER_MIME_ALIASES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'image/jpg': 'image/jpeg',
    'png': 'image/png',
    'gif': 'image/gif',
    'bmp': 'image/bmp',
    'webp': 'image/webp',
    'tif': 'image/tiff',
    'tiff': 'image/tiff',
}

# Batch extraction
BATCH_MAX_WORKERS = int(os.environ.get('BATCH_MAX_WORKERS', '4'))
BATCH_MAX_PATHS = int(os.environ.get('BATCH_MAX_PATHS', '500'))

# Logging configuration
import logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Log startup configuration
logger.info(f"Supporting {len(AUDIO_EXTENSIONS)} audio formats: {', '.join(sorted(AUDIO_EXTENSIONS))}")
