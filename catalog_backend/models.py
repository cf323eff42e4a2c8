"""
Book record types for the Catalog API

A book is a single record structure; its format (ebook, physical copy, ...)
is carried as a ``kind`` tag rather than a type hierarchy.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

try:
    from utils.response import convert_decimal
except ImportError:
    from catalog_backend.utils.response import convert_decimal


class BookKind(str, Enum):
    EBOOK = "ebook"
    PHYSICAL_COPY = "physical_copy"
    # Historical variants still present in older records
    PAPERBACK = "paperback"
    HARDCOVER = "hardcover"

    @classmethod
    def parse(cls, value: Any) -> "BookKind":
        """
        Parse a kind from its JSON representation.

        Accepts any case and ``physical-copy`` as an alias of ``physical_copy``.

        Raises:
            ValueError: If the value is not a known kind
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid book type: {value!r}")
        normalized = value.strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            allowed = ", ".join(k.value for k in cls)
            raise ValueError(f'Invalid book type "{value}" (expected one of: {allowed})') from None


@dataclass
class Book:
    isbn: str
    title: str
    author: str
    stock: int
    kind: BookKind
    id: str | None = None

    def to_item(self) -> dict[str, Any]:
        """Convert to a DynamoDB item (Books table)."""
        item: dict[str, Any] = {
            "isbn": self.isbn,
            "title": self.title,
            "author": self.author,
            "stock": self.stock,
            "kind": self.kind.value,
        }
        if self.id is not None:
            item["id"] = self.id
        return item

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "Book":
        """Build a Book from a DynamoDB item, converting Decimal numbers."""
        return cls(
            id=item.get("id"),
            isbn=item["isbn"],
            title=item.get("title", ""),
            author=item.get("author", ""),
            stock=convert_decimal(item.get("stock", 0)),
            kind=BookKind.parse(item["kind"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to API response format."""
        return {
            "id": self.id,
            "isbn": self.isbn,
            "title": self.title,
            "author": self.author,
            "stock": self.stock,
            "kind": self.kind.value,
            "bookType": self.kind.value,
        }

    @classmethod
    def from_dict(cls, body: dict[str, Any]) -> "Book":
        """
        Build a Book from a request body.

        Field types are checked by the catalog service; only the kind is
        parsed here. ``bookType`` is accepted as an alias of ``kind``.

        Raises:
            ValueError: If the kind is missing or unknown
        """
        kind = body.get("kind", body.get("bookType"))
        if kind is None:
            raise ValueError('Field "kind" is required')
        return cls(
            id=body.get("id"),
            isbn=body.get("isbn"),  # type: ignore[arg-type]
            title=body.get("title"),  # type: ignore[arg-type]
            author=body.get("author"),  # type: ignore[arg-type]
            stock=body.get("stock"),  # type: ignore[arg-type]
            kind=BookKind.parse(kind),
        )


PATCH_FIELDS = ("id", "isbn", "title", "author", "stock", "kind")


@dataclass
class BookPatch:
    """Partial update: fields left as None are not changed."""

    id: str | None = None
    isbn: str | None = None
    title: str | None = None
    author: str | None = None
    stock: int | None = None
    kind: BookKind | None = None

    @classmethod
    def from_dict(cls, body: dict[str, Any]) -> "BookPatch":
        """
        Build a patch from a request body.

        Raises:
            ValueError: On unknown fields or an unknown kind
        """
        body = dict(body)
        if "bookType" in body and "kind" not in body:
            body["kind"] = body.pop("bookType")
        unknown = sorted(set(body) - set(PATCH_FIELDS))
        if unknown:
            raise ValueError(f"Unknown fields: {', '.join(unknown)}")
        kind = body.get("kind")
        return cls(
            id=body.get("id"),
            isbn=body.get("isbn"),
            title=body.get("title"),
            author=body.get("author"),
            stock=body.get("stock"),
            kind=BookKind.parse(kind) if kind is not None else None,
        )

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in PATCH_FIELDS)


@dataclass
class BookMetadata:
    """Descriptive metadata returned by an external lookup service."""

    title: str
    author: str | None = None
    digital: bool = False
    page_count: int | None = None

    def infer_kind(self) -> BookKind | None:
        """
        Infer the book kind from the shape of the metadata.

        Digital-format availability wins over a page count; None when
        neither is present.
        """
        if self.digital:
            return BookKind.EBOOK
        if self.page_count:
            return BookKind.PHYSICAL_COPY
        return None
