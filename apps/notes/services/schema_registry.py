"""Schema registry - read-only access to rating schemas and their axes."""

from django.db.models import Prefetch, QuerySet

from apps.notes.models import RatingSchema, RatingAxis
from .exceptions import SchemaNotFoundError


def get_schema_by_id(*, schema_id: int) -> RatingSchema:
    """
    Retrieve a rating schema by ID.

    Inactive schemas are still returned: notes written against an older
    version keep referencing it.

    Raises:
        SchemaNotFoundError: If schema doesn't exist
    """
    try:
        return RatingSchema.objects.get(id=schema_id)
    except (RatingSchema.DoesNotExist, ValueError, TypeError):
        raise SchemaNotFoundError(f"Rating schema {schema_id} not found")


def get_active_schemas() -> QuerySet[RatingSchema]:
    """
    Get all active rating schemas with their axes prefetched.

    Returns:
        QuerySet of RatingSchema ordered by code and version, each with
        `axes` in display order
    """
    return (
        RatingSchema.objects
        .filter(is_active=True)
        .prefetch_related(
            Prefetch('axes', queryset=RatingAxis.objects.order_by('display_order'))
        )
        .order_by('code', 'version')
    )


def get_schema_axes(*, schema_id: int) -> QuerySet[RatingAxis]:
    """
    Get the axes of a schema ordered by display_order.

    Raises:
        SchemaNotFoundError: If schema doesn't exist
    """
    schema = get_schema_by_id(schema_id=schema_id)
    return RatingAxis.objects.filter(schema=schema).order_by('display_order', 'id')
