"""
Product Hub
Blueprint registry.
"""

from flask import request

from producthub.core.exceptions import ValidationError


def json_body() -> dict:
    """Return the request JSON object, or raise ValidationError.

    An empty body is treated as ``{}``; any non-object payload is rejected.
    """
    if not request.get_data():
        return {}
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
