"""
Lambda handlers for Catalog API

This module serves as the entry point for all Lambda functions.
It re-exports handlers from their respective modules for Lambda function configuration.

Architecture:
- API Gateway -> Lambda -> CatalogService -> DynamoDB (Books table, keyed by isbn)
- CatalogService -> Google Books (fallback for ISBNs missing locally, results stored)

Handlers:
1. list_handler: Lists all books
2. create_book_handler: Adds a new book (409 on duplicate ISBN)
3. get_book_handler: Gets a book by ISBN, with Google Books fallback
4. list_by_author_handler: Lists books by exact author name
5. update_book_handler: Partially updates title, author and stock
6. delete_book_handler: Deletes a book by ISBN
"""

# Re-export handlers for Lambda function configuration
# Support both local development (catalog_backend.X) and Lambda deployment (X)
try:
    # Lambda deployment (files are in root, not in catalog_backend/)
    from handlers.book_handlers import (
        create_book_handler,
        delete_book_handler,
        get_book_handler,
        list_by_author_handler,
        list_handler,
        update_book_handler,
    )
    from config import books_table
except ImportError:
    # Local development / testing (with catalog_backend package structure)
    from catalog_backend.handlers.book_handlers import (
        create_book_handler,
        delete_book_handler,
        get_book_handler,
        list_by_author_handler,
        list_handler,
        update_book_handler,
    )
    from catalog_backend.config import books_table

# Make handlers available at module level for Lambda
__all__ = [
    "list_handler",
    "create_book_handler",
    "get_book_handler",
    "list_by_author_handler",
    "update_book_handler",
    "delete_book_handler",
    # Also export config for tests
    "books_table",
]
