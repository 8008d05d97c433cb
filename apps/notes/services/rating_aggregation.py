"""Tea rating recomputation from notes."""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from apps.notes.models import Note
from apps.teas.models import Tea
from apps.teas.services import update_tea_rating
from apps.teas.services import TeaNotFoundError as TeaLookupError
from .exceptions import TeaNotFoundError

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


def compute_tea_rating(*, tea_id: UUID) -> tuple[Decimal, int]:
    """
    Compute a tea's mean overall rating and contributing note count.

    Only notes with is_rating_included=True and a non-null overall_rating
    contribute. With no contributing notes the result is (0, 0).

    Returns:
        Tuple of (average_rating rounded to 2 decimals, review_count)
    """
    ratings = list(
        Note.objects
        .filter(tea_id=tea_id, is_rating_included=True, overall_rating__isnull=False)
        .values_list('overall_rating', flat=True)
    )

    if not ratings:
        return Decimal('0.00'), 0

    total = sum((Decimal(rating) for rating in ratings), Decimal('0'))
    average = (total / len(ratings)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return average, len(ratings)


@transaction.atomic
def recompute_tea_rating(*, tea_id: UUID) -> Tea:
    """
    Recalculate and store a tea's aggregate rating from its notes.

    Always a full recomputation from source rows; there are no incremental
    counters. The tea row is locked before the notes are read, so
    concurrent recomputations for one tea run one after another and the
    last writer always sees every committed note. Errors propagate so the
    triggering note operation fails rather than leaving a stale aggregate
    behind.

    Args:
        tea_id: Tea UUID

    Returns:
        Updated Tea instance

    Raises:
        TeaNotFoundError: If tea doesn't exist
    """
    try:
        locked = list(Tea.objects.select_for_update().filter(id=tea_id).only('id'))
    except ValidationError:
        raise TeaNotFoundError(f"Tea {tea_id} not found")
    if not locked:
        raise TeaNotFoundError(f"Tea {tea_id} not found")

    average_rating, review_count = compute_tea_rating(tea_id=tea_id)

    try:
        tea = update_tea_rating(
            tea_id=tea_id,
            average_rating=average_rating,
            review_count=review_count,
        )
    except TeaLookupError:
        raise TeaNotFoundError(f"Tea {tea_id} not found")

    logger.info(
        "Recomputed rating for tea %s: avg=%s count=%d",
        tea_id, average_rating, review_count,
    )
    return tea
