"""
Lambda handlers for book catalog operations

Each handler translates an API Gateway proxy event into a catalog service
call and maps the outcome to a status code:

- GET    /books                  -> list_handler
- POST   /books                  -> create_book_handler
- GET    /books/{isbn}           -> get_book_handler
- GET    /books/author/{author}  -> list_by_author_handler
- PATCH  /books/{isbn}           -> update_book_handler
- DELETE /books/{isbn}           -> delete_book_handler
"""

from __future__ import annotations

import logging

# Support both Lambda deployment and local development
try:
    # Lambda deployment
    import config
    from models import Book, BookPatch
    from service import CatalogService
    from store import DynamoDBBookStore
    from utils.google_books import GoogleBooksLookup
    from utils.response import api_response, catalog_error_response, error_response
    from utils.validation import get_path_param, parse_json_body
except ImportError:
    # Local development
    import catalog_backend.config as config
    from catalog_backend.models import Book, BookPatch
    from catalog_backend.service import CatalogService
    from catalog_backend.store import DynamoDBBookStore
    from catalog_backend.utils.google_books import GoogleBooksLookup
    from catalog_backend.utils.response import api_response, catalog_error_response, error_response
    from catalog_backend.utils.validation import get_path_param, parse_json_body

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def get_catalog_service() -> CatalogService:
    """
    Build the catalog service from the configured table and lookup.

    Built per invocation so tests can patch config.books_table.
    """
    metadata_lookup = None
    if config.METADATA_LOOKUP_ENABLED:
        metadata_lookup = GoogleBooksLookup(
            api_url=config.GOOGLE_BOOKS_API_URL,
            api_key=config.GOOGLE_BOOKS_API_KEY,
            timeout=config.METADATA_LOOKUP_TIMEOUT_SECONDS,
        )
    return CatalogService(DynamoDBBookStore(config.books_table), metadata_lookup)


def list_handler(event, context):
    """
    Lambda handler to list all books in the catalog.
    """
    logger.info("list_handler invoked")

    try:
        result = get_catalog_service().get_all()
        books = [book.to_dict() for book in result.value]
        return api_response(200, books)

    except Exception as e:
        logger.error(f"Error listing books: {str(e)}", exc_info=True)
        return error_response(500, "Failed to list books", str(e))


def create_book_handler(event, context):
    """
    Lambda handler to add a new book.
    Expects JSON body with isbn, title, author, stock and kind (or bookType).
    Returns 201 with the stored book including its assigned id.
    """
    logger.info("create_book_handler invoked")

    try:
        body, error = parse_json_body(event)
        if error:
            return error

        try:
            book = Book.from_dict(body)
        except ValueError as e:
            logger.warning(f"Invalid book in request: {str(e)}")
            return error_response(400, "Bad Request", str(e))

        result = get_catalog_service().add_book(book)
        if not result.is_ok:
            logger.warning(f"Create rejected for ISBN {body.get('isbn')}: {result.error.message}")
            return catalog_error_response(result.error)

        logger.info(f"Created book: {result.value.isbn}")
        return api_response(201, result.value.to_dict())

    except Exception as e:
        logger.error(f"Error creating book: {str(e)}", exc_info=True)
        return error_response(500, "Internal Server Error", str(e))


def get_book_handler(event, context):
    """
    Lambda handler to get a single book by ISBN.
    Expects ISBN in path parameter 'isbn'.
    Books missing locally may be fetched from Google Books and stored.
    """
    logger.info("get_book_handler invoked")

    try:
        isbn, error = get_path_param(event, "isbn")
        if error:
            return error

        logger.info(f"Fetching book: {isbn}")

        result = get_catalog_service().find_by_isbn(isbn)
        if not result.is_ok:
            return catalog_error_response(result.error)
        if result.value is None:
            logger.warning(f"Book not found: {isbn}")
            return error_response(404, "Not Found", f'Book "{isbn}" not found')

        return api_response(200, result.value.to_dict())

    except Exception as e:
        logger.error(f"Error fetching book: {str(e)}", exc_info=True)
        return error_response(500, "Internal Server Error", str(e))


def list_by_author_handler(event, context):
    """
    Lambda handler to list books by an exact author name.
    Expects author in path parameter 'author'.
    """
    logger.info("list_by_author_handler invoked")

    try:
        author, error = get_path_param(event, "author")
        if error:
            return error

        result = get_catalog_service().find_by_author(author)
        if not result.is_ok:
            return catalog_error_response(result.error)

        logger.info(f"Found {len(result.value)} books by {author}")
        return api_response(200, [book.to_dict() for book in result.value])

    except Exception as e:
        logger.error(f"Error listing books by author: {str(e)}", exc_info=True)
        return error_response(500, "Internal Server Error", str(e))


def update_book_handler(event, context):
    """
    Lambda handler to partially update a book.
    Expects ISBN in path parameter 'isbn'.
    Accepts JSON body with any of title, author, stock; id, isbn and
    kind cannot be changed.
    """
    logger.info("update_book_handler invoked")

    try:
        isbn, error = get_path_param(event, "isbn")
        if error:
            return error

        logger.info(f"Updating book: {isbn}")

        body, error = parse_json_body(event)
        if error:
            return error

        try:
            patch = BookPatch.from_dict(body)
        except ValueError as e:
            logger.warning(f"Invalid update for {isbn}: {str(e)}")
            return error_response(400, "Bad Request", str(e))

        if patch.is_empty():
            return error_response(400, "Bad Request", "No valid fields to update")

        result = get_catalog_service().update_book(isbn, patch)
        if not result.is_ok:
            logger.warning(f"Update rejected for {isbn}: {result.error.message}")
            return catalog_error_response(result.error)

        return api_response(200, result.value.to_dict())

    except Exception as e:
        logger.error(f"Error updating book: {str(e)}", exc_info=True)
        return error_response(500, "Internal Server Error", str(e))


def delete_book_handler(event, context):
    """
    Lambda handler to delete a book by ISBN.
    Returns 204 with an empty body on success.
    """
    logger.info("delete_book_handler invoked")

    try:
        isbn, error = get_path_param(event, "isbn")
        if error:
            return error

        logger.info(f"Deleting book: {isbn}")

        result = get_catalog_service().delete_book(isbn)
        if not result.is_ok:
            logger.warning(f"Delete rejected for {isbn}: {result.error.message}")
            return catalog_error_response(result.error)

        return api_response(204)

    except Exception as e:
        logger.error(f"Error deleting book: {str(e)}", exc_info=True)
        return error_response(500, "Internal Server Error", str(e))
