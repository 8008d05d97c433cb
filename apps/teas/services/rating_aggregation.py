"""Single writer for a tea's denormalized rating aggregate."""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from ..models import Tea
from .exceptions import TeaNotFoundError, InvalidTeaRatingError

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


@transaction.atomic
def update_tea_rating(
    *,
    tea_id: UUID,
    average_rating: Decimal,
    review_count: int
) -> Tea:
    """
    Store a freshly computed rating aggregate on a tea.

    This is the only code path allowed to write Tea.average_rating and
    Tea.review_count. Callers compute the values from notes; this function
    only persists them.

    Uses select_for_update() so that concurrent recomputations for the
    same tea are applied one after another.

    Args:
        tea_id: Tea UUID
        average_rating: Mean overall rating (rounded to 2 decimals here)
        review_count: Number of notes that contributed

    Returns:
        Updated Tea instance

    Raises:
        TeaNotFoundError: If tea doesn't exist
        InvalidTeaRatingError: If values are negative
    """
    average_rating = Decimal(average_rating).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

    if average_rating < 0 or review_count < 0:
        raise InvalidTeaRatingError(
            f"Invalid aggregate for tea {tea_id}: avg={average_rating} count={review_count}"
        )

    try:
        # Lock the tea to prevent concurrent updates
        tea = (
            Tea.objects
            .select_for_update()
            .get(id=tea_id)
        )
    except (Tea.DoesNotExist, ValidationError):
        raise TeaNotFoundError(f"Tea {tea_id} not found")

    tea.average_rating = average_rating
    tea.review_count = review_count
    tea.save(update_fields=['average_rating', 'review_count', 'updated_at'])

    logger.debug(
        "Tea %s rating set to %s over %d notes", tea_id, average_rating, review_count
    )
    return tea

