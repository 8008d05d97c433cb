import pytest
from apps.teas.models import Tea


@pytest.fixture
def tea(db):
    """Create and return a test tea."""
    return Tea.objects.create(
        name='Dong Ding Oolong',
        year=2023,
        type='oolong',
        seller='Taipei Tea House',
        origin='Nantou',
    )
