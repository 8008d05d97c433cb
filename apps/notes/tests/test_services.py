"""
Service layer tests for notes app.

Tests all service functions for:
- Note lifecycle (create, get, list, update, delete)
- Tea aggregate rating recomputation
- Tag management
- Image cleanup
- Like / bookmark toggles
- Concurrency protection (duplicate toggle inserts)
"""

import pytest
import threading
from decimal import Decimal
from io import StringIO
from unittest import mock
from uuid import uuid4
from django.core.management import CommandError, call_command
from django.db import connection
from django.test import TransactionTestCase

from apps.notes.models import Note, NoteAxisValue, NoteBookmark, NoteLike, NoteTag, RatingAxis, RatingSchema, Tag
from apps.notes.services import (
    create_note,
    get_note,
    list_notes,
    update_note,
    delete_note,
    compute_tea_rating,
    recompute_tea_rating,
    toggle_like,
    toggle_bookmark,
    normalize_tag_name,
    normalize_tag_names,
    replace_note_tags,
    get_popular_tags,
    image_key_from_url,
    delete_note_images,
)
from apps.notes.services.exceptions import (
    NoteNotFoundError,
    TeaNotFoundError,
    SchemaNotFoundError,
    UnauthorizedNoteActionError,
    NoteAccessDeniedError,
    InvalidAxisError,
    AxisSchemaMismatchError,
    AxisValueOutOfRangeError,
    InvalidOverallRatingError,
)
from apps.teas.models import Tea


def _axis_map(note):
    return {item.axis.code: item.value for item in note.axis_values.all()}


# ============================================================================
# CREATE TESTS
# ============================================================================

@pytest.mark.django_db
class TestCreateNote:
    """Test note creation."""

    def test_create_note_success(self, note_user, tea, schema, axes):
        note = create_note(
            author=note_user,
            tea_id=tea.id,
            schema_id=schema.id,
            overall_rating=Decimal('4.5'),
            axis_values=[
                {'axis_id': axes[0].id, 'value': 4},
                {'axis_id': axes[1].id, 'value': 3},
            ],
            memo='Stone fruit and orchid',
            images=['https://cdn.example.com/notes/a.jpg'],
            tags=['Floral', ' stone  fruit '],
            is_public=True,
        )

        assert note.author == note_user
        assert note.tea == tea
        assert note.schema == schema
        assert note.overall_rating == Decimal('4.5')
        assert note.is_rating_included is True
        assert note.images == ['https://cdn.example.com/notes/a.jpg']
        assert _axis_map(note) == {'AROMA': Decimal('4'), 'TASTE': Decimal('3')}
        assert sorted(tag.name for tag in note.tags.all()) == ['floral', 'stone fruit']
        assert note.like_count == 0
        assert note.is_liked is False
        assert note.is_bookmarked is False

    def test_create_note_defaults(self, make_note):
        note = make_note()

        assert note.overall_rating is None
        assert note.is_public is False
        assert note.is_rating_included is True
        assert note.axis_values.count() == 0
        assert note.tags.count() == 0

    def test_create_note_updates_tea_rating(self, make_note, tea):
        make_note(overall_rating=Decimal('4.0'))

        tea.refresh_from_db()
        assert tea.average_rating == Decimal('4.00')
        assert tea.review_count == 1

    def test_create_note_excluded_from_rating(self, make_note, tea):
        make_note(overall_rating=Decimal('2.0'), is_rating_included=False)

        tea.refresh_from_db()
        assert tea.average_rating == Decimal('0.00')
        assert tea.review_count == 0

    def test_create_note_tea_not_found(self, note_user, schema):
        with pytest.raises(TeaNotFoundError):
            create_note(author=note_user, tea_id=uuid4(), schema_id=schema.id)

    def test_create_note_schema_not_found(self, note_user, tea):
        with pytest.raises(SchemaNotFoundError):
            create_note(author=note_user, tea_id=tea.id, schema_id=999999)

    def test_create_note_overall_out_of_range(self, make_note):
        with pytest.raises(InvalidOverallRatingError):
            make_note(overall_rating=Decimal('5.5'))

        assert Note.objects.count() == 0

    def test_create_note_invalid_axis_leaves_nothing(self, make_note, axes):
        with pytest.raises(InvalidAxisError):
            make_note(
                overall_rating=Decimal('4.0'),
                axis_values=[{'axis_id': 999999, 'value': 3}],
                tags=['floral'],
            )

        assert Note.objects.count() == 0
        assert NoteAxisValue.objects.count() == 0
        assert NoteTag.objects.count() == 0

    def test_create_note_axis_from_other_schema(self, make_note, other_schema):
        with pytest.raises(AxisSchemaMismatchError):
            make_note(axis_values=[{'axis_id': other_schema.axes.get().id, 'value': 3}])

        assert Note.objects.count() == 0

    def test_create_note_on_inactive_schema(self, make_note, other_schema):
        note = make_note(schema_id=other_schema.id, overall_rating=Decimal('8'))

        assert note.schema == other_schema


# ============================================================================
# READ TESTS
# ============================================================================

@pytest.mark.django_db
class TestGetNote:
    """Test single note retrieval and visibility."""

    def test_get_public_note_anonymous(self, public_note):
        note = get_note(note_id=public_note.id)

        assert note == public_note
        assert note.is_liked is False

    def test_get_private_note_by_author(self, private_note, note_user):
        assert get_note(note_id=private_note.id, viewer=note_user) == private_note

    def test_get_private_note_by_other_user(self, private_note, note_other_user):
        with pytest.raises(NoteAccessDeniedError):
            get_note(note_id=private_note.id, viewer=note_other_user)

    def test_get_private_note_anonymous(self, private_note):
        with pytest.raises(NoteAccessDeniedError):
            get_note(note_id=private_note.id)

    def test_get_note_not_found(self):
        with pytest.raises(NoteNotFoundError):
            get_note(note_id=uuid4())

    def test_axis_values_in_display_order(self, make_note, axes):
        note = make_note(axis_values=[
            {'axis_id': axes[2].id, 'value': 2},
            {'axis_id': axes[0].id, 'value': 5},
        ])

        assert [item.axis.code for item in get_note(note_id=note.id, viewer=note.author).axis_values.all()] == ['AROMA', 'FINISH']


@pytest.mark.django_db
class TestListNotes:
    """Test note listing and filters."""

    def test_anonymous_sees_public_only(self, public_note, private_note):
        assert list(list_notes()) == [public_note]

    def test_author_sees_own_private(self, public_note, private_note, note_user):
        assert set(list_notes(viewer=note_user)) == {public_note, private_note}

    def test_other_user_never_sees_private(self, public_note, private_note, note_user, note_other_user):
        notes = list(list_notes(viewer=note_other_user, user_id=note_user.id, is_public=False))

        assert notes == []

    def test_newest_first(self, make_note):
        first = make_note(is_public=True)
        second = make_note(is_public=True)

        assert list(list_notes()) == [second, first]

    def test_filter_by_tea(self, make_note, note_user, tea, another_tea):
        make_note(is_public=True)
        other = make_note(tea_id=another_tea.id, is_public=True)

        assert list(list_notes(tea_id=another_tea.id)) == [other]

    def test_filter_by_user(self, make_note, note_other_user):
        make_note(is_public=True)
        theirs = make_note(author=note_other_user, is_public=True)

        assert list(list_notes(user_id=note_other_user.id)) == [theirs]

    def test_filter_public_flag(self, public_note, private_note, note_user):
        assert list(list_notes(viewer=note_user, is_public=False)) == [private_note]
        assert list(list_notes(viewer=note_user, is_public=True)) == [public_note]

    def test_bookmarked_ordered_by_bookmark_time(self, make_note, note_other_user):
        older = make_note(is_public=True)
        newer = make_note(is_public=True)
        make_note(is_public=True)

        toggle_bookmark(note_id=newer.id, user=note_other_user)
        toggle_bookmark(note_id=older.id, user=note_other_user)

        notes = list(list_notes(viewer=note_other_user, bookmarked=True))
        assert notes == [older, newer]
        assert all(note.is_bookmarked for note in notes)

    def test_bookmarked_requires_viewer(self):
        with pytest.raises(NoteAccessDeniedError):
            list_notes(bookmarked=True)

    def test_social_state_per_viewer(self, public_note, note_user, note_other_user):
        toggle_like(note_id=public_note.id, user=note_other_user)

        mine = list_notes(viewer=note_user).get(id=public_note.id)
        theirs = list_notes(viewer=note_other_user).get(id=public_note.id)

        assert mine.like_count == 1
        assert mine.is_liked is False
        assert theirs.is_liked is True


# ============================================================================
# UPDATE TESTS
# ============================================================================

@pytest.mark.django_db
class TestUpdateNote:
    """Test partial updates."""

    def test_update_partial_fields(self, public_note, note_user):
        updated = update_note(note_id=public_note.id, user=note_user, memo='Second steep is better')

        assert updated.memo == 'Second steep is better'
        assert updated.overall_rating == Decimal('4.0')
        assert updated.is_public is True
        assert _axis_map(updated) == {'AROMA': Decimal('4'), 'TASTE': Decimal('5')}
        assert sorted(tag.name for tag in updated.tags.all()) == ['floral', 'roasted']

    def test_update_not_author(self, public_note, note_other_user):
        with pytest.raises(UnauthorizedNoteActionError):
            update_note(note_id=public_note.id, user=note_other_user, memo='Hijack')

    def test_update_not_found(self, note_user):
        with pytest.raises(NoteNotFoundError):
            update_note(note_id=uuid4(), user=note_user, memo='x')

    def test_update_replaces_axis_values(self, public_note, note_user, axes):
        updated = update_note(
            note_id=public_note.id,
            user=note_user,
            axis_values=[{'axis_id': axes[2].id, 'value': 2}],
        )

        assert _axis_map(updated) == {'FINISH': Decimal('2')}

    def test_update_empty_axis_values_clears(self, public_note, note_user):
        updated = update_note(note_id=public_note.id, user=note_user, axis_values=[])

        assert updated.axis_values.count() == 0

    def test_update_invalid_axis_keeps_existing(self, public_note, note_user, axes):
        with pytest.raises(AxisValueOutOfRangeError):
            update_note(
                note_id=public_note.id,
                user=note_user,
                axis_values=[{'axis_id': axes[0].id, 'value': 9}],
            )

        note = get_note(note_id=public_note.id, viewer=note_user)
        assert _axis_map(note) == {'AROMA': Decimal('4'), 'TASTE': Decimal('5')}

    def test_update_tags_empty_list_clears(self, public_note, note_user):
        updated = update_note(note_id=public_note.id, user=note_user, tags=[])

        assert updated.tags.count() == 0

    def test_update_tags_replaces(self, public_note, note_user):
        updated = update_note(note_id=public_note.id, user=note_user, tags=['Smoky'])

        assert [tag.name for tag in updated.tags.all()] == ['smoky']

    def test_update_rating_recomputes_tea(self, public_note, note_user, tea):
        update_note(note_id=public_note.id, user=note_user, overall_rating=Decimal('2.0'))

        tea.refresh_from_db()
        assert tea.average_rating == Decimal('2.00')
        assert tea.review_count == 1

    def test_update_exclude_from_rating(self, public_note, note_user, tea):
        update_note(note_id=public_note.id, user=note_user, is_rating_included=False)

        tea.refresh_from_db()
        assert tea.review_count == 0
        assert tea.average_rating == Decimal('0.00')

    def test_update_moves_note_to_other_tea(self, public_note, note_user, tea, another_tea):
        updated = update_note(note_id=public_note.id, user=note_user, tea_id=another_tea.id)

        tea.refresh_from_db()
        another_tea.refresh_from_db()
        assert updated.tea == another_tea
        assert tea.review_count == 0
        assert another_tea.review_count == 1
        assert another_tea.average_rating == Decimal('4.00')

    def test_update_schema_requires_matching_axes(self, public_note, note_user, other_schema, axes):
        with pytest.raises(AxisSchemaMismatchError):
            update_note(
                note_id=public_note.id,
                user=note_user,
                schema_id=other_schema.id,
                axis_values=[{'axis_id': axes[0].id, 'value': 3}],
            )

        public_note.refresh_from_db()
        assert public_note.schema_id != other_schema.id

    def test_update_schema_with_new_axes(self, public_note, note_user, other_schema):
        body = other_schema.axes.get()

        updated = update_note(
            note_id=public_note.id,
            user=note_user,
            schema_id=other_schema.id,
            axis_values=[{'axis_id': body.id, 'value': 7}],
        )

        assert updated.schema == other_schema
        assert _axis_map(updated) == {'BODY': Decimal('7')}

    def test_update_overall_out_of_range(self, public_note, note_user):
        with pytest.raises(InvalidOverallRatingError):
            update_note(note_id=public_note.id, user=note_user, overall_rating=Decimal('0.5'))

    def test_update_unknown_tea(self, public_note, note_user):
        with pytest.raises(TeaNotFoundError):
            update_note(note_id=public_note.id, user=note_user, tea_id=uuid4())


# ============================================================================
# DELETE TESTS
# ============================================================================

@pytest.mark.django_db
class TestDeleteNote:
    """Test note deletion."""

    def test_delete_note_cascades(self, public_note, note_user, note_other_user):
        toggle_like(note_id=public_note.id, user=note_other_user)
        toggle_bookmark(note_id=public_note.id, user=note_other_user)

        delete_note(note_id=public_note.id, user=note_user)

        assert not Note.objects.filter(id=public_note.id).exists()
        assert NoteAxisValue.objects.filter(note_id=public_note.id).count() == 0
        assert NoteTag.objects.filter(note_id=public_note.id).count() == 0
        assert NoteLike.objects.count() == 0
        assert NoteBookmark.objects.count() == 0
        # Tags themselves are shared and survive
        assert Tag.objects.filter(name='floral').exists()

    def test_delete_note_recomputes_tea(self, make_note, note_user, tea):
        keep = make_note(overall_rating=Decimal('3.0'))
        gone = make_note(overall_rating=Decimal('5.0'))

        delete_note(note_id=gone.id, user=note_user)

        tea.refresh_from_db()
        assert tea.average_rating == Decimal('3.00')
        assert tea.review_count == 1
        assert Note.objects.filter(id=keep.id).exists()

    def test_delete_not_author(self, public_note, note_other_user):
        with pytest.raises(UnauthorizedNoteActionError):
            delete_note(note_id=public_note.id, user=note_other_user)

        assert Note.objects.filter(id=public_note.id).exists()

    def test_delete_not_found(self, note_user):
        with pytest.raises(NoteNotFoundError):
            delete_note(note_id=uuid4(), user=note_user)

    def test_delete_survives_storage_failure(self, make_note, note_user):
        note = make_note(images=['https://cdn.example.com/media/notes/a.jpg'])

        with mock.patch('apps.notes.services.image_cleanup.default_storage') as storage:
            storage.delete.side_effect = OSError('bucket unreachable')
            delete_note(note_id=note.id, user=note_user)

        storage.delete.assert_called_once()

        assert not Note.objects.filter(id=note.id).exists()


# ============================================================================
# AGGREGATE RATING TESTS
# ============================================================================

@pytest.mark.django_db
class TestRatingAggregation:
    """Test tea aggregate recomputation."""

    def test_mean_of_included_notes(self, make_note, tea):
        make_note(overall_rating=Decimal('4.0'))
        make_note(overall_rating=Decimal('5.0'), is_rating_included=False)
        make_note(overall_rating=Decimal('3.0'))
        make_note(overall_rating=None)

        assert compute_tea_rating(tea_id=tea.id) == (Decimal('3.50'), 2)

        tea.refresh_from_db()
        assert tea.average_rating == Decimal('3.50')
        assert tea.review_count == 2

    def test_no_notes_is_zero(self, tea):
        assert compute_tea_rating(tea_id=tea.id) == (Decimal('0.00'), 0)

    def test_rounds_half_up(self, make_note, tea):
        make_note(overall_rating=Decimal('4.5'))
        make_note(overall_rating=Decimal('4.0'))
        make_note(overall_rating=Decimal('4.0'))

        average, count = compute_tea_rating(tea_id=tea.id)
        assert average == Decimal('4.17')
        assert count == 3

    def test_recompute_repairs_drift(self, make_note, tea):
        make_note(overall_rating=Decimal('4.0'))
        Tea.objects.filter(id=tea.id).update(average_rating=Decimal('1.00'), review_count=9)

        recompute_tea_rating(tea_id=tea.id)

        tea.refresh_from_db()
        assert tea.average_rating == Decimal('4.00')
        assert tea.review_count == 1

    def test_recompute_unknown_tea(self):
        with pytest.raises(TeaNotFoundError):
            recompute_tea_rating(tea_id=uuid4())

    def test_recompute_malformed_tea_id(self):
        with pytest.raises(TeaNotFoundError):
            recompute_tea_rating(tea_id='not-a-uuid')

    def test_ten_point_schema_maximum(self, make_note, tea, ten_point_schema):
        axis = ten_point_schema.axes.get()

        make_note(
            schema_id=ten_point_schema.id,
            overall_rating=Decimal('10'),
            axis_values=[{'axis_id': axis.id, 'value': 100}],
        )
        make_note(schema_id=ten_point_schema.id, overall_rating=Decimal('9.5'))

        tea.refresh_from_db()
        assert tea.average_rating == Decimal('9.75')
        assert tea.review_count == 2
        assert NoteAxisValue.objects.get().value == Decimal('100.0')


# ============================================================================
# TAG TESTS
# ============================================================================

@pytest.mark.django_db
class TestTagManagement:
    """Test tag normalization and popularity."""

    def test_normalize_tag_name(self):
        assert normalize_tag_name('  Stone   Fruit ') == 'stone fruit'
        assert normalize_tag_name('x' * 80) == 'x' * 50

    def test_normalize_tag_names_dedup(self):
        assert normalize_tag_names(['Floral', 'floral ', '', '  ', 'Honey']) == ['floral', 'honey']

    def test_replace_note_tags_reuses_tags(self, make_note):
        first = make_note(tags=['floral'])
        second = make_note(tags=['FLORAL', 'honey'])

        assert Tag.objects.filter(name='floral').count() == 1
        replace_note_tags(note=first, names=['honey'])
        assert list(first.tags.values_list('name', flat=True)) == ['honey']
        assert second.tags.count() == 2

    def test_popular_tags_counts_public_only(self, make_note):
        make_note(tags=['floral', 'honey'], is_public=True)
        make_note(tags=['floral'], is_public=True)
        make_note(tags=['secret', 'floral'], is_public=False)

        popular = list(get_popular_tags())

        assert [tag.name for tag in popular] == ['floral', 'honey']
        assert [tag.usage_count for tag in popular] == [2, 1]

    def test_popular_tags_limit(self, make_note):
        make_note(tags=['a', 'b', 'c'], is_public=True)

        assert len(get_popular_tags(limit=2)) == 2


# ============================================================================
# IMAGE CLEANUP TESTS
# ============================================================================

class TestImageCleanup:
    """Test best-effort image removal."""

    def test_key_strips_prefix(self, settings):
        settings.NOTE_IMAGE_URL_PREFIX = 'https://cdn.example.com/media/'

        assert image_key_from_url('https://cdn.example.com/media/notes/a%20b.jpg') == 'notes/a b.jpg'

    def test_key_falls_back_to_path(self, settings):
        settings.NOTE_IMAGE_URL_PREFIX = 'https://cdn.example.com/media/'

        assert image_key_from_url('https://other.example.com/x/y.png') == 'x/y.png'

    def test_key_empty(self):
        assert image_key_from_url('') is None

    def test_delete_counts_successes(self):
        with mock.patch('apps.notes.services.image_cleanup.default_storage') as storage:
            storage.delete.side_effect = [None, OSError('gone'), None]

            deleted = delete_note_images([
                'https://cdn.example.com/media/1.jpg',
                'https://cdn.example.com/media/2.jpg',
                'https://cdn.example.com/media/3.jpg',
            ])

        assert deleted == 2
        assert storage.delete.call_count == 3

    def test_delete_none(self):
        assert delete_note_images(None) == 0


# ============================================================================
# SOCIAL TOGGLE TESTS
# ============================================================================

@pytest.mark.django_db
class TestSocialToggles:
    """Test like and bookmark toggles."""

    def test_like_toggle_parity(self, public_note, note_other_user):
        results = [toggle_like(note_id=public_note.id, user=note_other_user) for _ in range(3)]

        assert [r.liked for r in results] == [True, False, True]
        assert [r.like_count for r in results] == [1, 0, 1]
        assert NoteLike.objects.filter(note=public_note).count() == 1

    def test_like_count_across_users(self, public_note, note_user, note_other_user):
        toggle_like(note_id=public_note.id, user=note_user)
        result = toggle_like(note_id=public_note.id, user=note_other_user)

        assert result.like_count == 2

    def test_bookmark_toggle_parity(self, public_note, note_other_user):
        assert toggle_bookmark(note_id=public_note.id, user=note_other_user).bookmarked is True
        assert toggle_bookmark(note_id=public_note.id, user=note_other_user).bookmarked is False
        assert NoteBookmark.objects.count() == 0

    def test_private_note_forbidden_for_others(self, private_note, note_other_user):
        with pytest.raises(NoteAccessDeniedError):
            toggle_like(note_id=private_note.id, user=note_other_user)

        with pytest.raises(NoteAccessDeniedError):
            toggle_bookmark(note_id=private_note.id, user=note_other_user)

    def test_private_note_allowed_for_author(self, private_note, note_user):
        assert toggle_like(note_id=private_note.id, user=note_user).liked is True
        assert toggle_bookmark(note_id=private_note.id, user=note_user).bookmarked is True

    def test_toggle_unknown_note(self, note_user):
        with pytest.raises(NoteNotFoundError):
            toggle_like(note_id=uuid4(), user=note_user)

    def test_concurrent_insert_treated_as_success(self, public_note, note_other_user):
        """A duplicate-key error from a racing insert reports the liked state."""
        # The competing request already committed its like
        NoteLike.objects.create(note=public_note, user=note_other_user)

        real_filter = NoteLike.objects.filter
        calls = []

        def stale_filter(*args, **kwargs):
            # Our existence check ran before the competing insert
            calls.append(kwargs)
            if len(calls) == 1:
                return NoteLike.objects.none()
            return real_filter(*args, **kwargs)

        with mock.patch.object(NoteLike.objects, 'filter', side_effect=stale_filter):
            result = toggle_like(note_id=public_note.id, user=note_other_user)

        assert result.liked is True
        assert result.like_count == 1
        assert NoteLike.objects.filter(note=public_note, user=note_other_user).count() == 1


# ============================================================================
# END-TO-END SCENARIO
# ============================================================================

@pytest.mark.django_db
class TestNoteScenario:
    """Full note lifecycle scenarios."""

    def test_two_axis_note_round_trip(self, note_user, tea):
        schema = RatingSchema.objects.create(
            code='PAIR',
            version='1.0.0',
            name_ko='두 축',
            name_en='Two Axes',
            overall_min_value=1,
            overall_max_value=5,
            overall_step=Decimal('0.5'),
        )
        a1 = RatingAxis.objects.create(
            schema=schema, code='A1', name_ko='A1', name_en='A1',
            min_value=1, max_value=5, step_value=Decimal('1.0'), display_order=1,
        )
        a2 = RatingAxis.objects.create(
            schema=schema, code='A2', name_ko='A2', name_en='A2',
            min_value=1, max_value=5, step_value=Decimal('1.0'), display_order=2,
        )

        note = create_note(
            author=note_user,
            tea_id=tea.id,
            schema_id=schema.id,
            overall_rating=Decimal('4.5'),
            axis_values=[{'axis_id': a1.id, 'value': 4}, {'axis_id': a2.id, 'value': 5}],
        )
        tea.refresh_from_db()
        assert (tea.average_rating, tea.review_count) == (Decimal('4.50'), 1)
        assert _axis_map(note) == {'A1': Decimal('4'), 'A2': Decimal('5')}

        delete_note(note_id=note.id, user=note_user)
        tea.refresh_from_db()
        assert (tea.average_rating, tea.review_count) == (Decimal('0.00'), 0)

    def test_standard_schema_lifecycle(self, note_user, note_other_user, tea):
        standard = RatingSchema.objects.get(code='STANDARD', version='1.0.0')
        richness, strength = RatingAxis.objects.filter(schema=standard).order_by('display_order')[:2]

        note = create_note(
            author=note_user,
            tea_id=tea.id,
            schema_id=standard.id,
            overall_rating=Decimal('4.4'),
            axis_values=[
                {'axis_id': richness.id, 'value': 4},
                {'axis_id': strength.id, 'value': 3},
            ],
            tags=['Nutty'],
            is_public=True,
        )
        tea.refresh_from_db()
        assert tea.average_rating == Decimal('4.40')

        assert toggle_like(note_id=note.id, user=note_other_user).like_count == 1
        assert toggle_bookmark(note_id=note.id, user=note_other_user).bookmarked is True

        seen = get_note(note_id=note.id, viewer=note_other_user)
        assert seen.is_liked is True
        assert seen.is_bookmarked is True

        update_note(note_id=note.id, user=note_user, overall_rating=Decimal('3.0'), is_public=False)
        with pytest.raises(NoteAccessDeniedError):
            get_note(note_id=note.id, viewer=note_other_user)

        delete_note(note_id=note.id, user=note_user)
        tea.refresh_from_db()
        assert tea.average_rating == Decimal('0.00')
        assert tea.review_count == 0


# ============================================================================
# CONCURRENCY TESTS
# ============================================================================

@pytest.mark.skipif(
    connection.vendor == 'sqlite',
    reason='SQLite serializes writers and ignores SELECT ... FOR UPDATE',
)
class TestConcurrency(TransactionTestCase):
    """Test concurrency protection with real database transactions."""

    def setUp(self):
        """Set up test data for concurrency tests."""
        from apps.accounts.models import User

        self.author = User.objects.create_user(email='author@example.com', password='TestPass123!')
        self.user = User.objects.create_user(email='concurrent@example.com', password='TestPass123!')
        self.tea = Tea.objects.create(name='Concurrent Oolong', type='oolong')
        self.schema = RatingSchema.objects.create(
            code='RACE',
            version='1.0.0',
            name_ko='경합',
            name_en='Race',
            overall_min_value=1,
            overall_max_value=5,
            overall_step=Decimal('0.5'),
        )
        self.note = create_note(
            author=self.author,
            tea_id=self.tea.id,
            schema_id=self.schema.id,
            overall_rating=Decimal('4.0'),
            is_public=True,
        )

    def test_concurrent_toggles_keep_single_row(self):
        """Even number of concurrent toggles by one user ends un-liked."""
        results = []
        errors = []

        def toggle_in_thread():
            try:
                results.append(toggle_like(note_id=self.note.id, user=self.user))
            except Exception as e:
                errors.append(e)
            finally:
                connection.close()

        threads = [threading.Thread(target=toggle_in_thread) for _ in range(4)]

        for thread in threads:
            thread.start()

        for thread in threads:
            thread.join()

        assert errors == []
        assert len(results) == 4
        assert NoteLike.objects.filter(note=self.note, user=self.user).count() == 0

    def test_concurrent_note_creation_aggregate_consistent(self):
        """Aggregate matches the notes after concurrent creates."""
        def create_in_thread(rating):
            try:
                create_note(
                    author=self.user,
                    tea_id=self.tea.id,
                    schema_id=self.schema.id,
                    overall_rating=rating,
                )
            finally:
                connection.close()

        threads = [
            threading.Thread(target=create_in_thread, args=(Decimal(r),))
            for r in ['1.0', '2.0', '3.0', '5.0']
        ]

        for thread in threads:
            thread.start()

        for thread in threads:
            thread.join()

        self.tea.refresh_from_db()
        assert self.tea.review_count == 5
        assert self.tea.average_rating == Decimal('3.00')


# ============================================================================
# MANAGEMENT COMMAND TESTS
# ============================================================================

@pytest.mark.django_db
class TestRecalculateCommand:
    """Test the recalculate_tea_ratings command."""

    def test_recalculates_all_teas(self, make_note, tea, another_tea):
        make_note(overall_rating=Decimal('5.0'))
        Tea.objects.update(average_rating=Decimal('1.00'), review_count=7)
        out = StringIO()

        call_command('recalculate_tea_ratings', stdout=out)

        tea.refresh_from_db()
        another_tea.refresh_from_db()
        assert (tea.average_rating, tea.review_count) == (Decimal('5.00'), 1)
        assert (another_tea.average_rating, another_tea.review_count) == (Decimal('0.00'), 0)
        assert 'Recalculated ratings for 2 teas' in out.getvalue()

    def test_unknown_tea(self):
        with pytest.raises(CommandError):
            call_command('recalculate_tea_ratings', '--tea', str(uuid4()), stdout=StringIO())

    def test_malformed_tea_id(self):
        with pytest.raises(CommandError):
            call_command('recalculate_tea_ratings', '--tea', 'not-a-uuid', stdout=StringIO())
