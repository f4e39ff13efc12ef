import functools
import hmac
import logging
from flask import current_app, jsonify, request

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Admin-Token"


def admin_required(view):
    """Reject the request unless X-Admin-Token matches ADMIN_API_TOKEN."""

    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        expected = current_app.config.get("ADMIN_API_TOKEN", "")
        supplied = request.headers.get(TOKEN_HEADER, "")
        if not expected or not hmac.compare_digest(supplied, expected):
            logger.warning("Rejected admin request to %s", request.path)
            return jsonify({"data": None, "error": "Forbidden"}), 403
        return view(*args, **kwargs)

    return wrapper
