"""Translate key conditions, filters and updates into DynamoDB expressions.

Attribute names always go behind ``#`` placeholders so names that collide with
DynamoDB reserved words work, and values always go behind ``:`` placeholders,
never into the expression string.

Placeholders:
    #pk / :pk           partition key
    #sk / :sk / :sk2    sort key (:sk2 only for between)
    #f{i} / :f{i}       i-th filter (:f{i}b for the upper bound of between)
    #field{i} / :val{i} i-th updated field

The public functions are pure: each call uses a fresh ExpressionBuilder and
returns the expression together with its placeholder maps.
"""

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any, NamedTuple

from dynamodesk.exceptions import EmptyUpdateError
from dynamodesk.models import (
    FilterCondition,
    FilterOperator,
    KeyCondition,
    KeyValueType,
    SortKeyCondition,
    SortKeyOperator,
)

logger = logging.getLogger(__name__)

_COMPARATORS = {
    "eq": "=",
    "ne": "<>",
    "lt": "<",
    "lte": "<=",
    "gt": ">",
    "gte": ">=",
}


class KeyAndFilterExpression(NamedTuple):
    """Expressions and placeholder maps for a query."""

    key_condition_expression: str
    filter_expression: str | None
    attribute_names: dict[str, str]
    attribute_values: dict[str, Any]


class FilterExpression(NamedTuple):
    """Expression and placeholder maps for a scan."""

    filter_expression: str | None
    attribute_names: dict[str, str]
    attribute_values: dict[str, Any]


class UpdateExpression(NamedTuple):
    """A SET update expression and its placeholder maps."""

    expression: str
    attribute_names: dict[str, str]
    attribute_values: dict[str, Any]


def coerce_key_value(value: str, value_type: KeyValueType | None) -> str | Decimal:
    """Coerce a key value typed in by the user to its DynamoDB type.

    Number-typed values become Decimal. If the text does not parse as a finite
    number the original string is returned unchanged and the store reports the
    type mismatch. String and binary values are returned as-is.
    """
    if value_type is KeyValueType.NUMBER:
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            number = None
        if number is not None and number.is_finite():
            return number
        logger.warning("Failed to parse numeric value: %r", value)
    return value


class ExpressionBuilder:
    """Accumulates placeholder maps while building expressions.

    Example:
        builder = ExpressionBuilder()
        key_expr = builder.build_key_condition_expression(key_condition)
        filter_expr = builder.build_filter_expression(filters)
        builder.attribute_names  # {"#pk": "user_id", "#f0": "status"}
        builder.attribute_values  # {":pk": "u-1", ":f0": "active"}

    """

    def __init__(self) -> None:
        self.attribute_names: dict[str, str] = {}
        self.attribute_values: dict[str, Any] = {}

    def build_key_condition_expression(self, key_condition: KeyCondition) -> str:
        partition_key = key_condition.partition_key
        self.attribute_names["#pk"] = partition_key.name
        self.attribute_values[":pk"] = coerce_key_value(
            partition_key.value, partition_key.value_type
        )
        expression = "#pk = :pk"

        if key_condition.sort_key is not None:
            sort_key_expression = self._build_sort_key_condition(key_condition.sort_key)
            expression = f"{expression} AND {sort_key_expression}"

        return expression

    def _build_sort_key_condition(self, sort_key: SortKeyCondition) -> str:
        self.attribute_names["#sk"] = sort_key.name
        self.attribute_values[":sk"] = coerce_key_value(sort_key.value, sort_key.value_type)

        operator = sort_key.operator
        if operator is SortKeyOperator.BEGINS_WITH:
            return "begins_with(#sk, :sk)"
        if operator is SortKeyOperator.BETWEEN:
            # A missing upper bound is bound as-is; the store rejects it.
            value2 = sort_key.value2
            self.attribute_values[":sk2"] = (
                coerce_key_value(value2, sort_key.value_type) if value2 else value2
            )
            return "#sk BETWEEN :sk AND :sk2"
        return f"#sk {_COMPARATORS[operator.value]} :sk"

    def build_filter_expression(self, filters: Sequence[FilterCondition]) -> str | None:
        """Build an AND-joined filter expression, or None when there are no filters."""
        conditions = [
            self._build_filter_condition(index, condition)
            for index, condition in enumerate(filters)
        ]
        return " AND ".join(conditions) if conditions else None

    def _build_filter_condition(self, index: int, condition: FilterCondition) -> str:
        name = f"#f{index}"
        value = f":f{index}"
        self.attribute_names[name] = condition.attribute

        operator = condition.operator
        if operator is FilterOperator.EXISTS:
            return f"attribute_exists({name})"
        if operator is FilterOperator.NOT_EXISTS:
            return f"attribute_not_exists({name})"

        self.attribute_values[value] = condition.value
        if operator is FilterOperator.BEGINS_WITH:
            return f"begins_with({name}, {value})"
        if operator is FilterOperator.CONTAINS:
            return f"contains({name}, {value})"
        if operator is FilterOperator.BETWEEN:
            self.attribute_values[f"{value}b"] = condition.value2
            return f"{name} BETWEEN {value} AND {value}b"
        return f"{name} {_COMPARATORS[operator.value]} {value}"

    def build_update_expression(self, updates: Mapping[str, Any]) -> str:
        """Build a single SET clause assigning every field in updates.

        Raises:
            EmptyUpdateError: If updates is empty.

        """
        if not updates:
            raise EmptyUpdateError()

        assignments = []
        for index, (field, new_value) in enumerate(updates.items()):
            name = f"#field{index}"
            value = f":val{index}"
            self.attribute_names[name] = field
            self.attribute_values[value] = new_value
            assignments.append(f"{name} = {value}")

        return f"SET {', '.join(assignments)}"


def build_key_and_filter(
    key_condition: KeyCondition,
    filters: Sequence[FilterCondition] = (),
) -> KeyAndFilterExpression:
    """Build the key condition and filter expressions of a query."""
    builder = ExpressionBuilder()
    key_condition_expression = builder.build_key_condition_expression(key_condition)
    filter_expression = builder.build_filter_expression(filters)
    return KeyAndFilterExpression(
        key_condition_expression=key_condition_expression,
        filter_expression=filter_expression,
        attribute_names=builder.attribute_names,
        attribute_values=builder.attribute_values,
    )


def build_filter(filters: Sequence[FilterCondition]) -> FilterExpression:
    """Build the filter expression of a scan."""
    builder = ExpressionBuilder()
    filter_expression = builder.build_filter_expression(filters)
    return FilterExpression(
        filter_expression=filter_expression,
        attribute_names=builder.attribute_names,
        attribute_values=builder.attribute_values,
    )


def build_update_expression(updates: Mapping[str, Any]) -> UpdateExpression:
    """Build a SET update expression for a field -> new value mapping.

    Raises:
        EmptyUpdateError: If updates is empty.

    Example:
        build_update_expression({"status": "shipped"})
        UpdateExpression(expression="SET #field0 = :val0",
                         attribute_names={"#field0": "status"},
                         attribute_values={":val0": "shipped"})

    """
    builder = ExpressionBuilder()
    expression = builder.build_update_expression(updates)
    return UpdateExpression(
        expression=expression,
        attribute_names=builder.attribute_names,
        attribute_values=builder.attribute_values,
    )


__all__ = [
    "ExpressionBuilder",
    "FilterExpression",
    "KeyAndFilterExpression",
    "UpdateExpression",
    "build_filter",
    "build_key_and_filter",
    "build_update_expression",
    "coerce_key_value",
]
