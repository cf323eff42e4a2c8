"""
Configuration and AWS resource initialization for Catalog API Lambda handlers

This module provides:
- DynamoDB resource and Books table
- Environment variable configuration
- Constants used across handlers and the catalog service
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import boto3

if TYPE_CHECKING:
    from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

# Constants
MAX_STRING_LENGTH = 500  # Maximum length for string fields
MAX_STOCK = 2**31 - 1  # Stock is a 32-bit signed integer column

# Environment configuration
AWS_REGION = os.environ.get("AWS_REGION", "us-east-2")
BOOKS_TABLE_NAME = os.environ.get("BOOKS_TABLE")

METADATA_LOOKUP_ENABLED = os.environ.get("METADATA_LOOKUP_ENABLED", "true").lower() in ("1", "true", "yes")
GOOGLE_BOOKS_API_URL = os.environ.get(
    "GOOGLE_BOOKS_API_URL", "https://www.googleapis.com/books/v1/volumes"
)
GOOGLE_BOOKS_API_KEY = os.environ.get("GOOGLE_BOOKS_API_KEY")
METADATA_LOOKUP_TIMEOUT_SECONDS = float(os.environ.get("METADATA_LOOKUP_TIMEOUT_SECONDS", "3"))

dynamodb: "DynamoDBServiceResource" = boto3.resource("dynamodb", region_name=AWS_REGION)

# Initialize DynamoDB table
# For type checking: treat as non-None (tests will mock this)
# For production: Lambda environment must have BOOKS_TABLE set
if BOOKS_TABLE_NAME:
    books_table: "Table" = dynamodb.Table(BOOKS_TABLE_NAME)
else:
    books_table = None  # type: ignore[assignment]
