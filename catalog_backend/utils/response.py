"""
Response building utilities for Catalog API

Provides functions to create standardized API Gateway responses.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

try:
    from errors import CatalogError, ErrorKind
except ImportError:
    from catalog_backend.errors import CatalogError, ErrorKind

# Status code and error category for each caller-visible error kind
ERROR_STATUS = {
    ErrorKind.INVALID_ARGUMENT: (400, "Bad Request"),
    ErrorKind.NOT_FOUND: (404, "Not Found"),
    ErrorKind.CONFLICT: (409, "Conflict"),
}


def api_response(status_code: int, body: Any = None) -> dict:
    """
    Helper to format API Gateway response with CORS headers.

    Args:
        status_code: HTTP status code
        body: Response body (will be JSON serialized); omitted for 204

    Returns:
        dict: API Gateway response with headers
    """
    return {
        "statusCode": status_code,
        "body": "" if status_code == 204 else json.dumps(body),
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Headers": "Content-Type,Authorization",
            "Access-Control-Allow-Methods": "GET, POST, PATCH, DELETE, OPTIONS",
        },
    }


def error_response(status_code: int, error: str, message: str) -> dict:
    """
    Helper to create error response.

    Args:
        status_code: HTTP status code
        error: Error type/category
        message: Error message

    Returns:
        dict: API Gateway error response
    """
    return api_response(status_code, {"error": error, "message": message})


def catalog_error_response(error: CatalogError) -> dict:
    """
    Map a catalog service error to an API Gateway error response.

    Unknown kinds are reported as 500.
    """
    status_code, category = ERROR_STATUS.get(error.kind, (500, "Internal Server Error"))
    return error_response(status_code, category, error.message)


def convert_decimal(value: Any) -> Any:
    """
    Convert Decimal types (from DynamoDB) to int or float for JSON serialization.

    Args:
        value: Value that might be a Decimal

    Returns:
        Converted value (int if whole number, otherwise original value)
    """
    if isinstance(value, Decimal):
        return int(value) if value % 1 == 0 else float(value)
    return value
