"""Axis value validation against a rating schema.

Pure checks only: nothing here writes to the database. The note lifecycle
service runs these before it clears any stored axis values, so a rejected
request leaves the note's rating state untouched.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

from apps.notes.models import RATING_LIMIT, RatingSchema, RatingAxis
from .exceptions import (
    InvalidAxisError,
    AxisSchemaMismatchError,
    AxisValueOutOfRangeError,
    InvalidOverallRatingError,
)


@dataclass(frozen=True)
class ValidatedAxisValue:
    """Axis resolved from the database paired with the submitted value."""

    axis: RatingAxis
    value: Decimal


def _to_decimal(raw: Any, *, field: str) -> Decimal:
    if isinstance(raw, bool):
        raise InvalidAxisError(f"{field} must be a number")
    try:
        value = Decimal(str(raw))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAxisError(f"{field} must be a number")
    if not value.is_finite():
        raise InvalidAxisError(f"{field} must be a number")
    return value


def _to_axis_id(raw: Any) -> int:
    if isinstance(raw, bool):
        raise InvalidAxisError("invalid axis ids")
    if isinstance(raw, int):
        return raw
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAxisError("invalid axis ids")
    # 1.9 must not silently become axis 1
    if not value.is_finite() or value != value.to_integral_value():
        raise InvalidAxisError("invalid axis ids")
    return int(value)


def validate_axis_values(
    *,
    schema: RatingSchema,
    axis_values: Iterable[Mapping[str, Any]]
) -> list[ValidatedAxisValue]:
    """
    Check submitted axis values against a schema.

    This operation:
    1. Rejects repeated axis ids
    2. Loads every referenced axis in a single query
    3. Rejects unknown ids (loaded count != distinct requested count)
    4. Rejects axes that belong to another schema
    5. Rejects values outside [axis.min_value, axis.max_value]

    Args:
        schema: Schema the note is (or will be) scored against
        axis_values: Iterable of {'axis_id': int, 'value': number}.
            An empty iterable is valid and means "no axis values".

    Returns:
        List of ValidatedAxisValue in submission order

    Raises:
        InvalidAxisError: Unknown, repeated or malformed axis ids/values
        AxisSchemaMismatchError: Axis belongs to a different schema
        AxisValueOutOfRangeError: Value outside the axis range
    """
    items = list(axis_values)
    if not items:
        return []

    try:
        requested_ids = [_to_axis_id(item['axis_id']) for item in items]
    except (KeyError, TypeError):
        raise InvalidAxisError("invalid axis ids")

    if len(set(requested_ids)) != len(requested_ids):
        raise InvalidAxisError("duplicate axis ids")

    axes = RatingAxis.objects.in_bulk(requested_ids)
    if len(axes) != len(set(requested_ids)):
        raise InvalidAxisError("invalid axis ids")

    if any(axis.schema_id != schema.id for axis in axes.values()):
        raise AxisSchemaMismatchError("axis/schema mismatch")

    validated = []
    for axis_id, item in zip(requested_ids, items):
        axis = axes[axis_id]
        value = _to_decimal(item.get('value'), field=f"value for axis {axis.code}")
        if not (axis.min_value <= value <= axis.max_value) or abs(value) > RATING_LIMIT:
            raise AxisValueOutOfRangeError(
                f"Value for axis {axis.code} must be between "
                f"{axis.min_value} and {axis.max_value}"
            )
        validated.append(ValidatedAxisValue(axis=axis, value=value))

    return validated


def validate_overall_rating(
    *,
    schema: RatingSchema,
    overall_rating: Optional[Any]
) -> Optional[Decimal]:
    """
    Check an overall rating against the schema's overall range.

    None is allowed (a note may omit its overall score).

    Raises:
        InvalidOverallRatingError: If not a number or out of range
    """
    if overall_rating is None:
        return None

    try:
        value = _to_decimal(overall_rating, field="overall rating")
    except InvalidAxisError as e:
        raise InvalidOverallRatingError(str(e))

    if not (schema.overall_min_value <= value <= schema.overall_max_value) or abs(value) > RATING_LIMIT:
        raise InvalidOverallRatingError(
            f"Overall rating must be between {schema.overall_min_value} "
            f"and {schema.overall_max_value}"
        )
    return value
