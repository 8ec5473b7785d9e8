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

from flask import Flask, jsonify, request

from config import PORT, HOST, BATCH_MAX_PATHS, logger
from core.metadata.reader import get_metadata
from core.batch.processor import read_metadata_batch

app = Flask(__name__)

@app.after_request
def add_cache_headers(response):
    """Add cache-control headers so proxies never serve stale metadata"""
    if response.mimetype == 'application/json':
        response.headers['Cache-Control'] = 'no-store, no-cache, must-revalidate, private'
        response.headers['Pragma'] = 'no-cache'
        response.headers['Expires'] = '0'
    return response

def _request_field(name):
    """Get a field from the JSON body, or None for a missing or malformed body"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data.get(name)

# =================
# METADATA COMMANDS
# =================

@app.route('/get_metadata', methods=['POST'])
def get_metadata_command():
    """Get display metadata for one file; null when none can be read"""
    path = _request_field('path')
    if not isinstance(path, str):
        logger.debug(f"[get_metadata] Ignoring non-string path: {path!r}")
        return jsonify(None)

    return jsonify(get_metadata(path))

@app.route('/get_metadata/batch', methods=['POST'])
def get_metadata_batch_command():
    """Get display metadata for many files, in request order"""
    paths = _request_field('paths')
    if not isinstance(paths, list):
        return jsonify([])

    if len(paths) > BATCH_MAX_PATHS:
        return jsonify({'error': 'Too many paths'}), 400

    # Non-string entries keep their slot and come back as null
    valid = [(index, path) for index, path in enumerate(paths) if isinstance(path, str)]
    results = [None] * len(paths)
    metadata = read_metadata_batch(path for _, path in valid)
    for (index, _), item in zip(valid, metadata):
        results[index] = item.to_dict() if item is not None else None

    logger.info(f"[get_metadata_batch] Processed {len(paths)} paths")
    return jsonify(results)

if __name__ == '__main__':
    app.run(host=HOST, port=PORT, debug=False)
