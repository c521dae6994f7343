"""
Validation routes blueprint.
Runs the entity schemas over JSON request bodies for form handlers and
other services.
"""
import logging
from flask import Blueprint, abort, current_app, request, jsonify

from marketguard.schemas.listing import listing_schema
from marketguard.schemas.message import message_schema
from marketguard.schemas.profile import profile_update_schema
from marketguard.schemas.search import search_query_schema
from marketguard.utils.json_utils import safe_json_parse

logger = logging.getLogger(__name__)

validate_bp = Blueprint("validate", __name__, url_prefix="/validate")

SCHEMAS = {
    "listing": listing_schema,
    "message": message_schema,
    "profile": profile_update_schema,
    "search": search_query_schema,
}


@validate_bp.post("/<entity>")
def validate(entity):
    """Validate one entity and return the sanitized record or every issue found."""
    schema = SCHEMAS.get(entity)
    if schema is None:
        return jsonify({"error": f"Unknown entity: {entity}"}), 404

    max_body = current_app.config["MAX_BODY_KB"] * 1024
    if request.content_length is not None and request.content_length > max_body:
        abort(413)

    payload = safe_json_parse(request.get_data(cache=False), None)
    if not isinstance(payload, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    result = schema.safe_parse(payload)
    if not result.success:
        logger.info(
            "Rejected %s: %s",
            entity,
            ", ".join(issue.path or "<record>" for issue in result.issues),
        )
        return jsonify(result.to_dict()), 400

    return jsonify(result.to_dict()), 200
