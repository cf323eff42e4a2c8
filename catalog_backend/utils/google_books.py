"""
Google Books metadata lookup for Catalog API

Used by the catalog service as a fallback when a book is not stored locally.
"""

from __future__ import annotations

import json
import logging
import urllib.parse
import urllib.request
from typing import Any

try:
    from models import BookMetadata
except ImportError:
    from catalog_backend.models import BookMetadata

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://www.googleapis.com/books/v1/volumes"


def build_lookup_url(isbn: str, api_url: str = DEFAULT_API_URL, api_key: str | None = None) -> str:
    """
    Build the Google Books volumes query URL for an ISBN.

    Hyphens and spaces are dropped from the ISBN before querying.
    """
    query = "isbn:" + isbn.replace("-", "").replace(" ", "")
    params = {"q": query, "maxResults": "1"}
    if api_key:
        params["key"] = api_key
    return f"{api_url}?{urllib.parse.urlencode(params)}"


def parse_volume(volume: dict[str, Any]) -> BookMetadata | None:
    """
    Map a Google Books volume resource to BookMetadata.

    Args:
        volume: One entry of the "items" array

    Returns:
        BookMetadata, or None if the volume has no title
    """
    volume_info = volume.get("volumeInfo", {})
    title = volume_info.get("title")
    if not title:
        return None

    authors = volume_info.get("authors") or []
    author = ", ".join(authors) if authors else None

    # Digital when sold as an ebook or an epub/pdf edition is available
    access_info = volume.get("accessInfo", {})
    digital = bool(volume.get("saleInfo", {}).get("isEbook")) or any(
        access_info.get(fmt, {}).get("isAvailable") for fmt in ("epub", "pdf")
    )

    page_count = volume_info.get("pageCount")
    if not isinstance(page_count, int) or page_count <= 0:
        page_count = None

    return BookMetadata(
        title=title,
        author=author,
        digital=digital,
        page_count=page_count,
    )


class GoogleBooksLookup:
    """
    Read-only metadata lookup against the Google Books volumes API.

    Any transport or decoding failure is logged and reported as None.
    """

    def __init__(self, api_url: str = DEFAULT_API_URL, api_key: str | None = None, timeout: float = 3):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout

    def lookup(self, isbn: str) -> BookMetadata | None:
        """
        Fetch metadata for an ISBN.

        Args:
            isbn: Book ISBN

        Returns:
            BookMetadata or None if not found or the request failed
        """
        url = build_lookup_url(isbn, self.api_url, self.api_key)

        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as response:
                data = json.loads(response.read())
        except Exception as e:
            logger.warning(f"Failed to fetch metadata for ISBN '{isbn}': {str(e)}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Unexpected Google Books payload for ISBN '{isbn}'")
            return None

        items = data.get("items") or []
        if not items:
            logger.info(f"No Google Books results for ISBN '{isbn}'")
            return None

        try:
            metadata = parse_volume(items[0])
        except (AttributeError, TypeError) as e:
            logger.warning(f"Malformed Google Books volume for ISBN '{isbn}': {str(e)}")
            return None

        if metadata is None:
            logger.info(f"Google Books result for ISBN '{isbn}' has no title")
        return metadata
