"""
Unit tests for utility modules and record types
"""

import json
import urllib.request
from decimal import Decimal
from unittest.mock import Mock, patch

import pytest

from catalog_backend.errors import CatalogError, ErrorKind
from catalog_backend.models import Book, BookKind, BookMetadata, BookPatch
from catalog_backend.utils.dynamodb import build_update_expression, build_update_params, scan_all
from catalog_backend.utils.google_books import GoogleBooksLookup, build_lookup_url, parse_volume
from catalog_backend.utils.response import (
    api_response,
    catalog_error_response,
    convert_decimal,
    error_response,
)
from catalog_backend.utils.validation import get_path_param, parse_json_body


def mock_urlopen_response(data):
    mock_response = Mock()
    mock_response.read.return_value = json.dumps(data).encode()
    mock_response.__enter__ = Mock(return_value=mock_response)
    mock_response.__exit__ = Mock(return_value=False)
    return mock_response


# ============================================================================
# Google Books Lookup Tests
# ============================================================================


def test_build_lookup_url_strips_hyphens():
    """Test the ISBN query drops hyphens and is URL-encoded"""

    url = build_lookup_url("978-0-13-468599-1")

    assert url.startswith("https://www.googleapis.com/books/v1/volumes?")
    assert "q=isbn%3A9780134685991" in url
    assert "maxResults=1" in url
    assert "key=" not in url


def test_build_lookup_url_with_api_key():
    """Test an API key is appended when configured"""

    url = build_lookup_url("123", api_url="https://example.test/volumes", api_key="secret")

    assert url.startswith("https://example.test/volumes?")
    assert "key=secret" in url


def test_parse_volume_ebook():
    """Test a volume with epub availability is digital"""

    volume = {
        "volumeInfo": {"title": "Effective Java", "authors": ["Joshua Bloch"]},
        "accessInfo": {"epub": {"isAvailable": True}, "pdf": {"isAvailable": False}},
    }

    metadata = parse_volume(volume)

    assert metadata.title == "Effective Java"
    assert metadata.author == "Joshua Bloch"
    assert metadata.digital is True
    assert metadata.infer_kind() == BookKind.EBOOK
    assert metadata == BookMetadata(title="Effective Java", author="Joshua Bloch", digital=True)


def test_parse_volume_is_ebook_sale_flag():
    """Test the saleInfo isEbook flag marks a volume digital"""

    volume = {"volumeInfo": {"title": "T"}, "saleInfo": {"isEbook": True}}

    assert parse_volume(volume).digital is True


def test_parse_volume_physical_copy():
    """Test a volume with only a page count is a physical copy"""

    volume = {
        "volumeInfo": {"title": "Clean Code", "authors": ["Robert C. Martin"], "pageCount": 464},
        "accessInfo": {"epub": {"isAvailable": False}},
    }

    metadata = parse_volume(volume)

    assert metadata.digital is False
    assert metadata.page_count == 464
    assert metadata.infer_kind() == BookKind.PHYSICAL_COPY


def test_parse_volume_joins_multiple_authors():
    """Test multiple authors are joined with commas"""

    volume = {"volumeInfo": {"title": "Design Patterns", "authors": ["Erich Gamma", "Richard Helm"]}}

    assert parse_volume(volume).author == "Erich Gamma, Richard Helm"


def test_parse_volume_without_authors_or_kind():
    """Test a volume without authors or format hints"""

    metadata = parse_volume({"volumeInfo": {"title": "Untitled", "pageCount": 0}})

    assert metadata.author is None
    assert metadata.page_count is None
    assert metadata.infer_kind() is None


def test_parse_volume_without_title():
    """Test a volume without a title is not usable"""

    assert parse_volume({"volumeInfo": {"authors": ["Someone"]}}) is None


def test_lookup_success():
    """Test a successful Google Books lookup"""

    data = {
        "totalItems": 1,
        "items": [{"volumeInfo": {"title": "Dune", "authors": ["Frank Herbert"], "pageCount": 604}}],
    }

    with patch.object(urllib.request, "urlopen", return_value=mock_urlopen_response(data)) as mock_urlopen:
        metadata = GoogleBooksLookup(timeout=5).lookup("978-0441172719")

    assert metadata == BookMetadata(title="Dune", author="Frank Herbert", digital=False, page_count=604)
    assert mock_urlopen.call_args.kwargs["timeout"] == 5


def test_lookup_no_results():
    """Test lookup returns None when Google Books has no items"""

    with patch.object(urllib.request, "urlopen", return_value=mock_urlopen_response({"totalItems": 0})):
        assert GoogleBooksLookup().lookup("9999999999999") is None


def test_lookup_network_error():
    """Test lookup returns None when the request fails"""

    with patch.object(urllib.request, "urlopen", side_effect=Exception("Network error")):
        assert GoogleBooksLookup().lookup("123") is None


def test_lookup_invalid_json():
    """Test lookup returns None on an undecodable payload"""

    mock_response = Mock()
    mock_response.read.return_value = b"<html>not json</html>"
    mock_response.__enter__ = Mock(return_value=mock_response)
    mock_response.__exit__ = Mock(return_value=False)

    with patch.object(urllib.request, "urlopen", return_value=mock_response):
        assert GoogleBooksLookup().lookup("123") is None


def test_lookup_malformed_volume():
    """Test lookup returns None when the volume has the wrong shape"""

    with patch.object(urllib.request, "urlopen", return_value=mock_urlopen_response({"items": [[]]})):
        assert GoogleBooksLookup().lookup("123") is None


# ============================================================================
# DynamoDB Utility Tests
# ============================================================================


def test_build_update_expression_basic():
    """Test build_update_expression with basic fields"""

    fields = {"title": "Dune", "stock": 750}

    expr, values, names = build_update_expression(fields)

    assert expr == "SET #title = :title, #stock = :stock"
    assert values == {":title": "Dune", ":stock": 750}
    assert names == {"#title": "title", "#stock": "stock"}


def test_build_update_expression_skips_none():
    """Test None values are left out of the expression"""

    expr, values, names = build_update_expression({"title": "Dune", "author": None})

    assert "#author" not in expr
    assert ":author" not in values
    assert "#author" not in names


def test_build_update_expression_keeps_zero():
    """Test a zero stock is written, not skipped"""

    expr, values, _ = build_update_expression({"stock": 0})

    assert expr == "SET #stock = :stock"
    assert values[":stock"] == 0


def test_build_update_expression_no_fields():
    """Test an update with nothing to set is rejected"""

    with pytest.raises(ValueError):
        build_update_expression({"title": None})


def test_build_update_params_basic():
    """Test build_update_params creates correct DynamoDB params"""

    params = build_update_params(
        key={"isbn": "978-0441172719"},
        fields={"author": "Frank Herbert"},
        condition_expression="attribute_exists(isbn)",
        return_values="ALL_NEW"
    )

    assert params["Key"] == {"isbn": "978-0441172719"}
    assert params["UpdateExpression"] == "SET #author = :author"
    assert params["ExpressionAttributeValues"] == {":author": "Frank Herbert"}
    assert params["ConditionExpression"] == "attribute_exists(isbn)"
    assert params["ReturnValues"] == "ALL_NEW"


def test_build_update_params_without_condition():
    """Test ConditionExpression is omitted when not given"""

    params = build_update_params(key={"isbn": "1"}, fields={"stock": 3})

    assert "ConditionExpression" not in params


def test_scan_all_single_page():
    """Test scan_all with a single page passes scan arguments through"""

    mock_table = Mock()
    mock_table.scan.return_value = {"Items": [{"isbn": "1"}]}

    items = scan_all(mock_table, FilterExpression="#a = :a")

    assert items == [{"isbn": "1"}]
    mock_table.scan.assert_called_once_with(FilterExpression="#a = :a")


def test_scan_all_multiple_pages():
    """Test scan_all follows LastEvaluatedKey"""

    mock_table = Mock()
    mock_table.scan.side_effect = [
        {"Items": [{"isbn": "1"}], "LastEvaluatedKey": {"isbn": "1"}},
        {"Items": [{"isbn": "2"}], "LastEvaluatedKey": {"isbn": "2"}},
        {"Items": []},
    ]

    items = scan_all(mock_table)

    assert [i["isbn"] for i in items] == ["1", "2"]
    assert mock_table.scan.call_count == 3


# ============================================================================
# Validation Utility Tests
# ============================================================================


def test_get_path_param_decodes_value():
    """Test path parameters are URL-decoded"""

    value, error = get_path_param({"pathParameters": {"author": "J.R.R.%20Tolkien"}}, "author")

    assert value == "J.R.R. Tolkien"
    assert error is None


def test_get_path_param_missing():
    """Test a missing path parameter yields a 400 response"""

    value, error = get_path_param({"pathParameters": None}, "isbn")

    assert value is None
    assert error["statusCode"] == 400
    assert "Isbn is required in path" in json.loads(error["body"])["message"]


def test_parse_json_body_null_body():
    """Test a null body parses as an empty object"""

    body, error = parse_json_body({"body": None})

    assert body == {}
    assert error is None


def test_parse_json_body_invalid():
    """Test invalid JSON yields a 400 response"""

    body, error = parse_json_body({"body": "{"})

    assert body == {}
    assert error["statusCode"] == 400


def test_parse_json_body_not_object():
    """Test a JSON string body is rejected"""

    _, error = parse_json_body({"body": '"just a string"'})

    assert error["statusCode"] == 400
    assert "JSON object" in json.loads(error["body"])["message"]


# ============================================================================
# Response Utility Tests
# ============================================================================


def test_api_response_headers():
    """Test responses carry JSON and CORS headers"""

    resp = api_response(200, {"ok": True})

    assert json.loads(resp["body"]) == {"ok": True}
    assert resp["headers"]["Content-Type"] == "application/json"
    assert "PATCH" in resp["headers"]["Access-Control-Allow-Methods"]


def test_api_response_no_content():
    """Test 204 responses have an empty body"""

    assert api_response(204)["body"] == ""


def test_error_response_format():
    resp = error_response(404, "Not Found", "missing")

    assert json.loads(resp["body"]) == {"error": "Not Found", "message": "missing"}


@pytest.mark.parametrize(
    "kind,status",
    [
        (ErrorKind.INVALID_ARGUMENT, 400),
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.CONFLICT, 409),
        (ErrorKind.EXTERNAL_LOOKUP_FAILURE, 500),
    ],
)
def test_catalog_error_response_status(kind, status):
    """Test each error kind maps to its status code"""

    resp = catalog_error_response(CatalogError(kind, "message"))

    assert resp["statusCode"] == status
    assert json.loads(resp["body"])["message"] == "message"


def test_convert_decimal():
    assert convert_decimal(Decimal("150")) == 150
    assert isinstance(convert_decimal(Decimal("150")), int)
    assert convert_decimal(Decimal("1.5")) == 1.5
    assert convert_decimal("x") == "x"


# ============================================================================
# Record Type Tests
# ============================================================================


@pytest.mark.parametrize(
    "value,kind",
    [
        ("ebook", BookKind.EBOOK),
        ("EBook", BookKind.EBOOK),
        ("physical-copy", BookKind.PHYSICAL_COPY),
        ("physical_copy", BookKind.PHYSICAL_COPY),
        ("paperback", BookKind.PAPERBACK),
        ("hardcover", BookKind.HARDCOVER),
    ],
)
def test_book_kind_parse(value, kind):
    assert BookKind.parse(value) == kind


@pytest.mark.parametrize("value", ["audiobook", "", None, 3])
def test_book_kind_parse_invalid(value):
    with pytest.raises(ValueError):
        BookKind.parse(value)


def test_book_item_round_trip_omits_missing_id():
    """Test a new book's DynamoDB item has no id attribute"""

    book = Book(isbn="1", title="T", author="A", stock=0, kind=BookKind.EBOOK)

    item = book.to_item()

    assert "id" not in item
    assert item["kind"] == "ebook"
    assert Book.from_item({**item, "stock": Decimal("0")}) == book


def test_book_from_dict_requires_kind():
    with pytest.raises(ValueError):
        Book.from_dict({"isbn": "1", "title": "T", "author": "A", "stock": 1})


def test_book_patch_from_dict():
    """Test patches keep unset fields as None and parse the kind"""

    patch_ = BookPatch.from_dict({"stock": 5, "bookType": "physical-copy"})

    assert patch_.stock == 5
    assert patch_.title is None
    assert patch_.kind == BookKind.PHYSICAL_COPY
    assert not patch_.is_empty()


def test_book_patch_rejects_unknown_fields():
    with pytest.raises(ValueError, match="price"):
        BookPatch.from_dict({"price": 10})


def test_book_patch_empty():
    assert BookPatch.from_dict({}).is_empty()
