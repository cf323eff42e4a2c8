"""
Request validation utilities for Catalog API

Provides functions to validate and extract data from API Gateway events.
Field-level rules for book records live in the catalog service.
"""

from __future__ import annotations

import json
import logging
from urllib.parse import unquote

logger = logging.getLogger()


def get_path_param(event: dict, param: str) -> tuple[str | None, dict | None]:
    """
    Extract and URL-decode a path parameter from API Gateway event.

    Args:
        event: API Gateway event
        param: Parameter name to extract

    Returns:
        tuple: (decoded_value, error_response) - If successful, error_response is None
    """
    from .response import error_response

    path_params = event.get("pathParameters") or {}
    if param not in path_params:
        logger.warning(f"Missing {param} in path parameters")
        return None, error_response(
            400, "Bad Request", f"{param.capitalize()} is required in path"
        )
    return unquote(path_params[param]), None


def parse_json_body(event: dict) -> tuple[dict, dict | None]:
    """
    Parse a JSON object body from API Gateway event.

    Args:
        event: API Gateway event

    Returns:
        tuple: (parsed_body, error_response) - If successful, error_response is None
               If error, parsed_body is empty dict (caller should check error first)
    """
    from .response import error_response

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        logger.warning("Invalid JSON in request body")
        return {}, error_response(400, "Bad Request", "Invalid JSON in request body")

    if not isinstance(body, dict):
        logger.warning("Request body is not a JSON object")
        return {}, error_response(400, "Bad Request", "Request body must be a JSON object")

    return body, None
