"""
Error types for the catalog service

Caller-visible conditions are returned as a ``Result`` carrying a
``CatalogError``; the handlers map the error kind to an HTTP status code.
Store exceptions are raised by the store layer and translated by the service.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_ARGUMENT = "invalid_argument"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    # Logged by the service, never returned to callers
    EXTERNAL_LOOKUP_FAILURE = "external_lookup_failure"


@dataclass(frozen=True)
class CatalogError:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a catalog operation.

    Exactly one of ``value`` / ``error`` is meaningful: check ``is_ok`` first.
    For lookups, a successful result may carry ``None`` to mean "not found".
    """

    value: T | None = None
    error: CatalogError | None = None

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "Result[T]":
        return cls(error=CatalogError(kind, message))


class StoreError(Exception):
    """Base class for catalog store failures the service knows how to translate."""


class DuplicateIsbnError(StoreError):
    """Raised when a write would create a second record with the same ISBN."""

    def __init__(self, isbn: str):
        super().__init__(f"A book with ISBN {isbn} already exists.")
        self.isbn = isbn


class BookMissingError(StoreError):
    """Raised when a conditional write targets a record that no longer exists."""

    def __init__(self, isbn: str):
        super().__init__(f"Book with ISBN {isbn} not found.")
        self.isbn = isbn
