"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Dict, Optional
from flask import request


def get_json_body(request_obj=None) -> Dict:
    """Return the JSON body of a request, or an empty dict."""
    if request_obj is None:
        request_obj = request

    data = request_obj.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_max_players(value, default: int) -> Optional[int]:
    """Coerce a client-supplied max_players value; None when it is not an integer."""
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
