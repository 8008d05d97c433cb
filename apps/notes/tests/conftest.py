import pytest
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.notes.models import RatingAxis, RatingSchema
from apps.notes.services import create_note
from apps.teas.models import Tea


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def note_user(db):
    """Create and return the note author."""
    return User.objects.create_user(
        email='taster@example.com',
        password='TestPass123!',
        name='Tea Taster',
    )


@pytest.fixture
def note_other_user(db):
    """Create and return another user."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        name='Other Taster',
    )


@pytest.fixture
def auth_client(note_user):
    """Return API client authenticated as the note author."""
    return _client_for(note_user)


@pytest.fixture
def other_client(note_other_user):
    """Return API client authenticated as the other user."""
    return _client_for(note_other_user)


@pytest.fixture
def tea(db):
    """Create and return a test tea."""
    return Tea.objects.create(name='Dong Ding Oolong', year=2023, type='oolong', seller='Taipei Tea House')


@pytest.fixture
def another_tea(db):
    """Create and return another test tea."""
    return Tea.objects.create(name='Longjing', year=2024, type='green', seller='Hangzhou Market')


@pytest.fixture
def schema(db):
    """Create an active schema: overall 1..5 step 0.5 with three 1..5 axes."""
    schema = RatingSchema.objects.create(
        code='TEST',
        version='1.0.0',
        name_ko='테스트 평가',
        name_en='Test Rating',
        overall_min_value=1,
        overall_max_value=5,
        overall_step=Decimal('0.5'),
        is_active=True,
    )
    for order, code in enumerate(['AROMA', 'TASTE', 'FINISH'], start=1):
        RatingAxis.objects.create(
            schema=schema,
            code=code,
            name_ko=code,
            name_en=code.title(),
            min_value=1,
            max_value=5,
            step_value=Decimal('1.0'),
            display_order=order,
            is_required=True,
        )
    return schema


@pytest.fixture
def axes(schema):
    """Axes of the test schema in display order."""
    return list(schema.axes.order_by('display_order'))


@pytest.fixture
def other_schema(db):
    """Create a second schema with a single 0..10 axis."""
    schema = RatingSchema.objects.create(
        code='WIDE',
        version='2.0.0',
        name_ko='넓은 평가',
        name_en='Wide Rating',
        overall_min_value=0,
        overall_max_value=10,
        overall_step=Decimal('1.0'),
        is_active=False,
    )
    RatingAxis.objects.create(
        schema=schema,
        code='BODY',
        name_ko='바디',
        name_en='Body',
        min_value=0,
        max_value=10,
        step_value=Decimal('1.0'),
        display_order=1,
    )
    return schema


@pytest.fixture
def ten_point_schema(db):
    """Active schema scored 0..10 overall with a percentage axis."""
    schema = RatingSchema.objects.create(
        code='TEN',
        version='1.0.0',
        name_ko='10점 평가',
        name_en='Ten Point Rating',
        overall_min_value=0,
        overall_max_value=10,
        overall_step=Decimal('0.5'),
    )
    RatingAxis.objects.create(
        schema=schema,
        code='INTENSITY',
        name_ko='강도',
        name_en='Intensity',
        min_value=0,
        max_value=100,
        step_value=Decimal('1.0'),
        display_order=1,
    )
    return schema


@pytest.fixture
def make_note(note_user, tea, schema):
    """Factory creating notes through the service layer."""
    def _make_note(**kwargs):
        kwargs.setdefault('author', note_user)
        kwargs.setdefault('tea_id', tea.id)
        kwargs.setdefault('schema_id', schema.id)
        return create_note(**kwargs)
    return _make_note


@pytest.fixture
def public_note(make_note, axes):
    """A public 4.0 note with two axis values and tags."""
    return make_note(
        overall_rating=Decimal('4.0'),
        axis_values=[
            {'axis_id': axes[0].id, 'value': 4},
            {'axis_id': axes[1].id, 'value': 5},
        ],
        memo='Roasted, honeyed finish',
        tags=['Floral', 'roasted'],
        is_public=True,
    )


@pytest.fixture
def private_note(make_note):
    """A private 3.0 note."""
    return make_note(overall_rating=Decimal('3.0'), memo='Just for me', is_public=False)
