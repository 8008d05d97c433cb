"""Tea lookup and creation service."""

import logging

from django.db import transaction
from django.core.exceptions import ValidationError
from django.db.models import Q, QuerySet
from uuid import UUID
from typing import Optional

from ..models import Tea
from .exceptions import TeaNotFoundError

logger = logging.getLogger(__name__)


@transaction.atomic
def create_tea(
    *,
    name: str,
    type: str,
    year: Optional[int] = None,
    seller: str = '',
    origin: str = '',
) -> Tea:
    """
    Create a new tea with an empty rating aggregate.

    Args:
        name: Tea name
        type: Tea type (e.g. 'green', 'oolong', 'puerh')
        year: Harvest/production year
        seller: Shop or brand
        origin: Region of origin

    Returns:
        Created Tea instance
    """
    tea = Tea.objects.create(
        name=name,
        type=type,
        year=year,
        seller=seller,
        origin=origin,
    )
    logger.info("Created tea %s (%s)", tea.id, tea.name)
    return tea


def get_tea_by_id(*, tea_id: UUID) -> Tea:
    """
    Retrieve a tea by ID.

    Raises:
        TeaNotFoundError: If tea doesn't exist
    """
    try:
        return Tea.objects.get(id=tea_id)
    except (Tea.DoesNotExist, ValidationError):
        raise TeaNotFoundError(f"Tea {tea_id} not found")


def search_teas(*, query: str = '') -> QuerySet[Tea]:
    """Case-insensitive match on name, type or seller, newest first."""
    queryset = Tea.objects.all()

    if query:
        queryset = queryset.filter(
            Q(name__icontains=query) |
            Q(type__icontains=query) |
            Q(seller__icontains=query)
        )

    return queryset.order_by('-created_at')
