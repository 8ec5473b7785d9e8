"""
Batch metadata operations for Metadata Probe
Handles reading metadata for many files at once
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from config import BATCH_MAX_WORKERS, logger
from core.metadata.models import AudioMetadata
from core.metadata.reader import read_metadata

def read_metadata_batch(paths: Iterable, max_workers: int = BATCH_MAX_WORKERS) -> List[Optional[AudioMetadata]]:
    """
    Read metadata for every path concurrently

    Args:
        paths: Paths to read, in the order results should be returned
        max_workers: Upper bound on worker threads

    Returns:
        list: One AudioMetadata or None per input path, in input order
    """
    paths = list(paths)
    if not paths:
        return []

    workers = max(1, min(max_workers, len(paths)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='metadata') as executor:
        results = list(executor.map(read_metadata, paths))

    found = sum(1 for result in results if result is not None)
    logger.info(f"Read metadata for {found} of {len(paths)} files")
    return results
