"""
DynamoDB-backed catalog store

The Books table uses ``isbn`` as its partition key, so ISBN uniqueness is
enforced by a conditional write rather than by the service-level check.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import TYPE_CHECKING, Protocol

from botocore.exceptions import ClientError

try:
    from errors import BookMissingError, DuplicateIsbnError
    from models import Book
    from utils.dynamodb import build_update_params, scan_all
except ImportError:
    from catalog_backend.errors import BookMissingError, DuplicateIsbnError
    from catalog_backend.models import Book
    from catalog_backend.utils.dynamodb import build_update_params, scan_all

if TYPE_CHECKING:
    from mypy_boto3_dynamodb.service_resource import Table

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


class BookStore(Protocol):
    def find_all(self) -> list[Book]: ...

    def find_by_isbn(self, isbn: str) -> Book | None: ...

    def find_by_author(self, author: str) -> list[Book]: ...

    def save(self, book: Book) -> Book: ...

    def update(self, book: Book) -> Book: ...

    def delete(self, book: Book) -> None: ...


def _is_condition_failure(e: ClientError) -> bool:
    return e.response["Error"]["Code"] == CONDITIONAL_CHECK_FAILED  # type: ignore[typeddict-item]


class DynamoDBBookStore:
    def __init__(self, table: "Table"):
        self.table = table

    def find_all(self) -> list[Book]:
        items = scan_all(self.table)
        logger.info(f"Retrieved {len(items)} books from DynamoDB")
        return [Book.from_item(item) for item in items]

    def find_by_isbn(self, isbn: str) -> Book | None:
        response = self.table.get_item(Key={"isbn": isbn})
        if "Item" not in response:
            return None
        return Book.from_item(response["Item"])

    def find_by_author(self, author: str) -> list[Book]:
        items = scan_all(
            self.table,
            FilterExpression="#author = :author",
            ExpressionAttributeNames={"#author": "author"},
            ExpressionAttributeValues={":author": author},
        )
        return [Book.from_item(item) for item in items]

    def save(self, book: Book) -> Book:
        """
        Insert a new book.

        The book gets a generated id and is written with a condition that
        rejects an existing ISBN.

        Raises:
            DuplicateIsbnError: If the ISBN is already stored
        """
        new_book = replace(book, id=uuid.uuid4().hex)
        try:
            self.table.put_item(
                Item=new_book.to_item(),
                ConditionExpression="attribute_not_exists(isbn)",
            )
        except ClientError as e:
            if _is_condition_failure(e):
                logger.warning(f"Duplicate ISBN rejected by table: {book.isbn}")
                raise DuplicateIsbnError(book.isbn) from e
            raise

        logger.info(f"Created book {new_book.isbn} with id {new_book.id}")
        return new_book

    def update(self, book: Book) -> Book:
        """
        Update title, author and stock of a stored book, keyed by ISBN.

        Records written without an id get one assigned here.

        Raises:
            BookMissingError: If the book was deleted concurrently
        """
        update_params = build_update_params(
            key={"isbn": book.isbn},
            fields={"title": book.title, "author": book.author, "stock": book.stock},
            condition_expression="attribute_exists(isbn)",
            return_values="ALL_NEW",
        )
        update_params["UpdateExpression"] += ", #id = if_not_exists(#id, :id)"
        update_params["ExpressionAttributeNames"]["#id"] = "id"
        update_params["ExpressionAttributeValues"][":id"] = book.id or uuid.uuid4().hex

        try:
            response = self.table.update_item(**update_params)
        except ClientError as e:
            if _is_condition_failure(e):
                raise BookMissingError(book.isbn) from e
            raise

        logger.info(f"Successfully updated book: {book.isbn}")
        return Book.from_item(response["Attributes"])

    def delete(self, book: Book) -> None:
        try:
            self.table.delete_item(
                Key={"isbn": book.isbn}, ConditionExpression="attribute_exists(isbn)"
            )
        except ClientError as e:
            if _is_condition_failure(e):
                raise BookMissingError(book.isbn) from e
            raise
        logger.info(f"Successfully deleted book: {book.isbn}")
