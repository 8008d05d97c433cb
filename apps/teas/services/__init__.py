"""Services for teas business logic."""

from .exceptions import (
    TeasServiceError,
    TeaNotFoundError,
    InvalidTeaRatingError,
)
from .tea_management import (
    create_tea,
    get_tea_by_id,
    search_teas,
)
from .rating_aggregation import (
    update_tea_rating,
)

__all__ = [
    # Exceptions
    'TeasServiceError',
    'TeaNotFoundError',
    'InvalidTeaRatingError',
    # Tea Management
    'create_tea',
    'get_tea_by_id',
    'search_teas',
    # Rating Aggregate Writer
    'update_tea_rating',
]
