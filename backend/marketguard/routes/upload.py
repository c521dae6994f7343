"""
Upload routes blueprint.
Checks a picked file against the upload policy before it goes to storage.
"""
import os
import logging
from flask import Blueprint, current_app, request, jsonify
from werkzeug.utils import secure_filename

from marketguard.utils.file_utils import (
    FileCheckResult,
    FileMeta,
    FileUploadPolicy,
    sniff_mime,
    validate_file_upload,
)

logger = logging.getLogger(__name__)

upload_bp = Blueprint("upload", __name__)


def _stream_size(stream) -> int:
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


@upload_bp.route("/uploads/check", methods=["POST"])
def check_upload():
    """Validate an uploaded file's size, type and name."""
    f = request.files.get("file")
    if f is None or not f.filename:
        return jsonify({"error": "No file part in the request"}), 400

    policy = FileUploadPolicy.from_config(current_app.config)
    meta = FileMeta(name=f.filename, size=_stream_size(f.stream), mime_type=f.mimetype)

    result = validate_file_upload(meta, policy)
    if result.valid and current_app.config["SNIFF_UPLOAD_MIME"]:
        sniffed = sniff_mime(f.stream)
        if sniffed not in policy.allowed_mime_types:
            result = FileCheckResult.reject(
                f"Invalid file type. File content looks like {sniffed or 'unknown'}"
            )

    if not result.valid:
        logger.warning("Upload rejected for %r: %s", f.filename, result.error)
        return jsonify(result.to_dict()), 400

    body = result.to_dict()
    body["filename"] = secure_filename(f.filename)
    return jsonify(body), 200
