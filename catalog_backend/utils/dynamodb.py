"""
DynamoDB utilities for Catalog API

Provides functions for building DynamoDB update expressions and paginated scans.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from mypy_boto3_dynamodb.service_resource import Table


def build_update_expression(
    fields: dict[str, Any],
) -> tuple[str, dict[str, Any], dict[str, str]]:
    """
    Build a DynamoDB SET expression from a dictionary of fields.

    Fields whose value is None are skipped: a partial update never clears
    an attribute.

    Args:
        fields: Dictionary of field names to values

    Returns:
        tuple: (update_expression, expression_attribute_values, expression_attribute_names)

    Example:
        fields = {"title": "Dune", "stock": 750, "author": None}
        expr, values, names = build_update_expression(fields)
        # expr = "SET #title = :title, #stock = :stock"
        # values = {":title": "Dune", ":stock": 750}
        # names = {"#title": "title", "#stock": "stock"}
    """
    set_parts = []
    expr_attr_values: dict[str, Any] = {}
    expr_attr_names: dict[str, str] = {}

    for field, value in fields.items():
        if value is None:
            continue

        # Use attribute name placeholders to avoid reserved word conflicts
        name_placeholder = f"#{field}"
        value_placeholder = f":{field}"

        expr_attr_names[name_placeholder] = field
        expr_attr_values[value_placeholder] = value
        set_parts.append(f"{name_placeholder} = {value_placeholder}")

    if not set_parts:
        raise ValueError("No fields to update")

    return "SET " + ", ".join(set_parts), expr_attr_values, expr_attr_names


def build_update_params(
    key: Dict[str, Any],
    fields: Dict[str, Any],
    condition_expression: str | None = None,
    return_values: str = "ALL_NEW"
) -> Dict[str, Any]:
    """
    Build complete DynamoDB update_item parameters.

    Args:
        key: Primary key for the item to update
        fields: Dictionary of field names to values (None values are skipped)
        condition_expression: Optional condition expression
        return_values: Return values option (default: ALL_NEW)

    Returns:
        dict: Complete parameters for table.update_item()

    Example:
        params = build_update_params(
            key={"isbn": "978-0441172719"},
            fields={"stock": 749},
            condition_expression="attribute_exists(isbn)"
        )
        response = table.update_item(**params)
    """
    update_expression, expr_values, expr_names = build_update_expression(fields)

    params = {
        "Key": key,
        "UpdateExpression": update_expression,
        "ExpressionAttributeNames": expr_names,
        "ExpressionAttributeValues": expr_values,
        "ReturnValues": return_values,
    }

    if condition_expression:
        params["ConditionExpression"] = condition_expression

    return params


def scan_all(table: "Table", **scan_kwargs: Any) -> list[dict]:
    """
    Scan a table, following LastEvaluatedKey until every page is read.

    Args:
        table: DynamoDB table
        **scan_kwargs: Extra scan parameters (e.g. FilterExpression)

    Returns:
        list: All items across pages, in table order
    """
    response = table.scan(**scan_kwargs)
    items = response.get("Items", [])

    while "LastEvaluatedKey" in response:
        response = table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **scan_kwargs)
        items.extend(response.get("Items", []))

    return items
