"""
Catalog service: business rules for book records

The service validates input, enforces the catalog invariants (one record per
ISBN, immutable id/isbn/kind, partial-update merge) and falls back to an
external metadata lookup when a book is not stored locally.

Every operation returns a ``Result``. Invalid input, duplicates and missing
records are reported through ``Result.error``; store failures the service
cannot translate are raised.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Protocol

try:
    from config import MAX_STOCK, MAX_STRING_LENGTH
    from errors import BookMissingError, DuplicateIsbnError, ErrorKind, Result
    from models import Book, BookKind, BookMetadata, BookPatch
    from store import BookStore
except ImportError:
    from catalog_backend.config import MAX_STOCK, MAX_STRING_LENGTH
    from catalog_backend.errors import BookMissingError, DuplicateIsbnError, ErrorKind, Result
    from catalog_backend.models import Book, BookKind, BookMetadata, BookPatch
    from catalog_backend.store import BookStore

logger = logging.getLogger(__name__)


class MetadataLookup(Protocol):
    def lookup(self, isbn: str) -> BookMetadata | None: ...


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _check_string(value: Any, field: str) -> str | None:
    """Return an error message if value is not a non-blank string of allowed length."""
    if not isinstance(value, str):
        return f'Field "{field}" must be a string'
    if not value.strip():
        return f'Field "{field}" cannot be empty'
    if len(value) > MAX_STRING_LENGTH:
        return f'Field "{field}" exceeds maximum length of {MAX_STRING_LENGTH}'
    return None


def _check_stock(value: Any) -> str | None:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        return 'Field "stock" must be an integer'
    if value < 0 or value > MAX_STOCK:
        return f'Field "stock" must be between 0 and {MAX_STOCK}'
    return None


class CatalogService:
    def __init__(self, store: BookStore, metadata_lookup: MetadataLookup | None = None):
        self.store = store
        self.metadata_lookup = metadata_lookup

    def get_all(self) -> Result[list[Book]]:
        return Result.ok(self.store.find_all())

    def find_by_isbn(self, isbn: str | None) -> Result[Book]:
        """
        Find a book by ISBN, falling back to the external metadata lookup.

        Not a pure query: when the book is missing locally and the lookup
        returns usable metadata, a new record (stock 0) is saved to the store
        before it is returned, so later lookups are served locally.

        Returns:
            Result whose value is the book, or None if it could not be found
            locally or externally
        """
        if _is_blank(isbn):
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "ISBN cannot be null or empty")
        isbn = isbn.strip()  # type: ignore[union-attr]

        book = self.store.find_by_isbn(isbn)
        if book is not None:
            return Result.ok(book)

        if self.metadata_lookup is None:
            return Result.ok(None)

        return Result.ok(self._fetch_and_cache(isbn))

    def _fetch_and_cache(self, isbn: str) -> Book | None:
        try:
            metadata = self.metadata_lookup.lookup(isbn)  # type: ignore[union-attr]
        except Exception as e:
            logger.warning(
                f"{ErrorKind.EXTERNAL_LOOKUP_FAILURE.value} for ISBN {isbn}: {str(e)}",
                exc_info=True,
            )
            return None

        if metadata is None:
            logger.info(f"Book {isbn} not found locally or externally")
            return None

        kind = metadata.infer_kind()
        if kind is None:
            logger.info(f"Cannot infer book type for {isbn} from external metadata")
            return None

        new_book = Book(
            isbn=isbn,
            title=metadata.title,
            author=metadata.author or "",
            stock=0,
            kind=kind,
        )
        try:
            saved = self.store.save(new_book)
        except DuplicateIsbnError:
            # Another request cached it first
            return self.store.find_by_isbn(isbn)

        logger.info(f"Cached external metadata for {isbn} as {kind.value}")
        return saved

    def add_book(self, book: Book | None) -> Result[Book]:
        if book is None:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "Book cannot be null")
        if _is_blank(book.isbn):
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "ISBN cannot be null or empty")
        if book.id is not None:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "id cannot be set on a new book")

        for field in ("isbn", "title", "author"):
            message = _check_string(getattr(book, field), field)
            if message:
                return Result.fail(ErrorKind.INVALID_ARGUMENT, message)
        message = _check_stock(book.stock)
        if message:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, message)
        if not isinstance(book.kind, BookKind):
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "Book type is required")

        book = replace(book, isbn=book.isbn.strip())
        conflict = f"A book with ISBN {book.isbn} already exists."

        if self.store.find_by_isbn(book.isbn) is not None:
            return Result.fail(ErrorKind.CONFLICT, conflict)

        try:
            saved = self.store.save(book)
        except DuplicateIsbnError:
            return Result.fail(ErrorKind.CONFLICT, conflict)
        return Result.ok(saved)

    def find_by_author(self, author: str | None) -> Result[list[Book]]:
        if _is_blank(author):
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "Author cannot be null or empty")
        return Result.ok(self.store.find_by_author(author))  # type: ignore[arg-type]

    def update_book(self, isbn: str | None, patch: BookPatch | None) -> Result[Book]:
        """
        Apply a partial update to the book with the given ISBN.

        Only title, author and stock can change, and only where the patch
        provides a value. Patches that set id, change the ISBN or change the
        book type are rejected.
        """
        if _is_blank(isbn):
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "ISBN cannot be null or empty")
        if patch is None:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "Update cannot be null")
        isbn = isbn.strip()  # type: ignore[union-attr]

        if patch.id is not None:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "id cannot be updated")
        if patch.isbn is not None and (not isinstance(patch.isbn, str) or patch.isbn.strip() != isbn):
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "isbn cannot be updated")
        for field in ("title", "author"):
            value = getattr(patch, field)
            message = _check_string(value, field) if value is not None else None
            if message:
                return Result.fail(ErrorKind.INVALID_ARGUMENT, message)
        if patch.stock is not None:
            message = _check_stock(patch.stock)
            if message:
                return Result.fail(ErrorKind.INVALID_ARGUMENT, message)

        existing = self.store.find_by_isbn(isbn)
        if existing is None:
            return Result.fail(ErrorKind.NOT_FOUND, f"Book with ISBN {isbn} not found.")

        if patch.kind is not None and patch.kind != existing.kind:
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "type cannot be updated")

        if patch.title is not None:
            existing.title = patch.title
        if patch.author is not None:
            existing.author = patch.author
        if patch.stock is not None:
            existing.stock = patch.stock

        try:
            return Result.ok(self.store.update(existing))
        except BookMissingError:
            return Result.fail(ErrorKind.NOT_FOUND, f"Book with ISBN {isbn} not found.")

    def delete_book(self, isbn: str | None) -> Result[bool]:
        if _is_blank(isbn):
            return Result.fail(ErrorKind.INVALID_ARGUMENT, "ISBN cannot be null or empty")
        isbn = isbn.strip()  # type: ignore[union-attr]

        existing = self.store.find_by_isbn(isbn)
        if existing is None:
            return Result.fail(ErrorKind.NOT_FOUND, f"Book with ISBN {isbn} not found.")

        try:
            self.store.delete(existing)
        except BookMissingError:
            return Result.fail(ErrorKind.NOT_FOUND, f"Book with ISBN {isbn} not found.")
        return Result.ok(True)
