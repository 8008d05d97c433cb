"""
Service layer tests for teas app.

Tests:
- Tea creation and lookup
- Search
- Aggregate rating writer
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from apps.teas.services import (
    create_tea,
    get_tea_by_id,
    search_teas,
    update_tea_rating,
)
from apps.teas.services.exceptions import TeaNotFoundError, InvalidTeaRatingError


@pytest.mark.django_db
class TestTeaManagement:
    """Test tea creation and lookup."""

    def test_create_tea_starts_unrated(self):
        tea = create_tea(name='Sencha', type='green', year=2024, seller='Uji Shop')

        assert tea.id is not None
        assert tea.average_rating == Decimal('0.00')
        assert tea.review_count == 0
        assert str(tea) == 'Sencha (2024)'

    def test_get_tea_by_id(self, tea):
        assert get_tea_by_id(tea_id=tea.id) == tea

    def test_get_tea_not_found(self):
        with pytest.raises(TeaNotFoundError):
            get_tea_by_id(tea_id=uuid4())

    def test_get_tea_malformed_id(self):
        with pytest.raises(TeaNotFoundError):
            get_tea_by_id(tea_id='not-a-uuid')

    def test_search_teas(self, tea):
        create_tea(name='Longjing', type='green')

        assert list(search_teas(query='oolong')) == [tea]
        assert search_teas(query='').count() == 2
        assert list(search_teas(query='taipei')) == [tea]


@pytest.mark.django_db
class TestUpdateTeaRating:
    """Test the aggregate rating writer."""

    def test_update_rounds_to_two_places(self, tea):
        updated = update_tea_rating(tea_id=tea.id, average_rating=Decimal('3.666'), review_count=3)

        tea.refresh_from_db()
        assert updated.average_rating == Decimal('3.67')
        assert tea.average_rating == Decimal('3.67')
        assert tea.review_count == 3

    def test_update_half_rounds_up(self, tea):
        update_tea_rating(tea_id=tea.id, average_rating=Decimal('4.125'), review_count=4)

        tea.refresh_from_db()
        assert tea.average_rating == Decimal('4.13')

    def test_update_to_zero(self, tea):
        update_tea_rating(tea_id=tea.id, average_rating=Decimal('4.00'), review_count=1)
        update_tea_rating(tea_id=tea.id, average_rating=Decimal('0'), review_count=0)

        tea.refresh_from_db()
        assert tea.average_rating == Decimal('0.00')
        assert tea.review_count == 0

    def test_update_rejects_negative(self, tea):
        with pytest.raises(InvalidTeaRatingError):
            update_tea_rating(tea_id=tea.id, average_rating=Decimal('-1'), review_count=1)

        with pytest.raises(InvalidTeaRatingError):
            update_tea_rating(tea_id=tea.id, average_rating=Decimal('1'), review_count=-1)

    def test_update_tea_not_found(self):
        with pytest.raises(TeaNotFoundError):
            update_tea_rating(tea_id=uuid4(), average_rating=Decimal('3'), review_count=1)
