"""Note lifecycle service - create, read, update and delete tasting notes."""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import (
    BooleanField,
    Count,
    Exists,
    OuterRef,
    Prefetch,
    Q,
    QuerySet,
    Subquery,
    Value,
)
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional
from uuid import UUID

from apps.accounts.models import User
from apps.notes.models import Note, NoteAxisValue, NoteBookmark, NoteLike
from apps.teas.models import Tea
from apps.teas.services import get_tea_by_id
from apps.teas.services import TeaNotFoundError as TeaLookupError
from .axis_validation import (
    ValidatedAxisValue,
    validate_axis_values,
    validate_overall_rating,
)
from .exceptions import (
    NoteNotFoundError,
    TeaNotFoundError,
    UnauthorizedNoteActionError,
    NoteAccessDeniedError,
)
from .image_cleanup import delete_note_images
from .rating_aggregation import recompute_tea_rating
from .schema_registry import get_schema_by_id
from .tag_management import replace_note_tags

logger = logging.getLogger(__name__)

# Marks a field that was left out of a partial update
UNSET: Any = object()


# ============================================================================
# READ SIDE
# ============================================================================

def annotate_social_state(
    queryset: QuerySet[Note],
    *,
    viewer: Optional[User] = None
) -> QuerySet[Note]:
    """
    Annotate notes with like_count, is_liked and is_bookmarked.

    These values are derived per viewer at read time and never stored.
    Anonymous viewers get is_liked/is_bookmarked = False.
    """
    queryset = queryset.annotate(like_count=Count('likes', distinct=True))

    if viewer is None:
        return queryset.annotate(
            is_liked=Value(False, output_field=BooleanField()),
            is_bookmarked=Value(False, output_field=BooleanField()),
        )

    return queryset.annotate(
        is_liked=Exists(NoteLike.objects.filter(note=OuterRef('pk'), user=viewer)),
        is_bookmarked=Exists(NoteBookmark.objects.filter(note=OuterRef('pk'), user=viewer)),
    )


def _hydrated_notes(viewer: Optional[User]) -> QuerySet[Note]:
    queryset = (
        Note.objects
        .select_related('tea', 'author', 'schema')
        .prefetch_related(
            Prefetch(
                'axis_values',
                queryset=NoteAxisValue.objects.select_related('axis').order_by('axis__display_order'),
            ),
            'tags',
        )
    )
    return annotate_social_state(queryset, viewer=viewer)


def get_note(*, note_id: UUID, viewer: Optional[User] = None) -> Note:
    """
    Retrieve a note with its axis values, tags and social state.

    Private notes are readable by their author only.

    Args:
        note_id: UUID of note
        viewer: Requesting user, or None for anonymous access

    Returns:
        Note annotated with like_count, is_liked, is_bookmarked

    Raises:
        NoteNotFoundError: If note doesn't exist
        NoteAccessDeniedError: If note is private and viewer is not the author
    """
    try:
        note = _hydrated_notes(viewer).get(id=note_id)
    except (Note.DoesNotExist, ValidationError):
        raise NoteNotFoundError(f"Note {note_id} not found")

    if not note.is_visible_to(viewer):
        raise NoteAccessDeniedError("You do not have permission to view this note")

    return note


def list_notes(
    *,
    viewer: Optional[User] = None,
    user_id: Optional[UUID] = None,
    is_public: Optional[bool] = None,
    tea_id: Optional[UUID] = None,
    bookmarked: bool = False
) -> QuerySet[Note]:
    """
    List notes visible to the viewer with optional filters.

    Someone else's private note is never listed, whatever the filters.

    Args:
        viewer: Requesting user, or None for anonymous access
        user_id: Only notes written by this user
        is_public: Only public (True) or only private (False) notes
        tea_id: Only notes about this tea
        bookmarked: Only notes the viewer bookmarked, newest bookmark first

    Returns:
        QuerySet of annotated Note instances

    Raises:
        NoteAccessDeniedError: If bookmarked=True without a viewer
    """
    queryset = _hydrated_notes(viewer)

    if viewer is None:
        queryset = queryset.filter(is_public=True)
    else:
        queryset = queryset.filter(Q(is_public=True) | Q(author=viewer))

    if user_id:
        queryset = queryset.filter(author_id=user_id)

    if is_public is not None:
        queryset = queryset.filter(is_public=is_public)

    if tea_id:
        queryset = queryset.filter(tea_id=tea_id)

    if bookmarked:
        if viewer is None:
            raise NoteAccessDeniedError("Sign in to see bookmarked notes")
        bookmarked_at = (
            NoteBookmark.objects
            .filter(note=OuterRef('pk'), user=viewer)
            .values('created_at')[:1]
        )
        return (
            queryset
            .annotate(bookmarked_at=Subquery(bookmarked_at))
            .filter(bookmarked_at__isnull=False)
            .order_by('-bookmarked_at', '-created_at')
        )

    return queryset.order_by('-created_at')


# ============================================================================
# WRITE SIDE
# ============================================================================

def _resolve_tea(tea_id: UUID) -> Tea:
    try:
        return get_tea_by_id(tea_id=tea_id)
    except TeaLookupError:
        raise TeaNotFoundError(f"Tea {tea_id} not found")


def _get_note_for_update(note_id: UUID) -> Note:
    try:
        return Note.objects.select_for_update().get(id=note_id)
    except (Note.DoesNotExist, ValidationError):
        raise NoteNotFoundError(f"Note {note_id} not found")


def replace_axis_values(*, note: Note, validated: list[ValidatedAxisValue]) -> None:
    """
    Replace every axis value of a note with an already validated set.

    Deletes before it inserts, so callers must run validate_axis_values
    first. An empty list leaves the note with no axis values.
    """
    NoteAxisValue.objects.filter(note=note).delete()
    NoteAxisValue.objects.bulk_create([
        NoteAxisValue(note=note, axis=item.axis, value=item.value)
        for item in validated
    ])


@transaction.atomic
def create_note(
    *,
    author: User,
    tea_id: UUID,
    schema_id: int,
    overall_rating: Optional[Decimal] = None,
    is_rating_included: Optional[bool] = None,
    axis_values: Optional[Iterable[Mapping[str, Any]]] = None,
    memo: Optional[str] = None,
    images: Optional[list[str]] = None,
    tags: Optional[list[str]] = None,
    is_public: bool = False
) -> Note:
    """
    Create a tasting note.

    This operation:
    1. Resolves the tea and the rating schema
    2. Validates the overall rating and every axis value (before any write)
    3. Saves the note row
    4. Inserts axis values and tag associations
    5. Recomputes the tea's aggregate rating

    Everything runs in one transaction, so a failure at any step leaves
    no note, axis value or tag association behind.

    Args:
        author: User writing the note
        tea_id: UUID of the tea
        schema_id: ID of the rating schema the note is scored against
        overall_rating: Overall score, or None to omit it
        is_rating_included: Count this note in the tea average (default True)
        axis_values: Iterable of {'axis_id', 'value'}
        memo: Free-text tasting memo
        images: Image URLs
        tags: Tag names (normalized and deduplicated)
        is_public: Visible to everyone when True

    Returns:
        Created Note annotated for the author

    Raises:
        TeaNotFoundError: If tea doesn't exist
        SchemaNotFoundError: If schema doesn't exist
        InvalidAxisError: Unknown or repeated axis ids
        AxisSchemaMismatchError: Axis from another schema
        AxisValueOutOfRangeError: Axis value out of range
        InvalidOverallRatingError: Overall rating out of range
    """
    tea = _resolve_tea(tea_id)
    schema = get_schema_by_id(schema_id=schema_id)

    if is_rating_included is None:
        is_rating_included = True

    rating = validate_overall_rating(schema=schema, overall_rating=overall_rating)
    validated = validate_axis_values(schema=schema, axis_values=axis_values or [])

    note = Note.objects.create(
        tea=tea,
        author=author,
        schema=schema,
        overall_rating=rating,
        is_rating_included=is_rating_included,
        memo=memo,
        images=images,
        is_public=is_public,
    )

    if validated:
        replace_axis_values(note=note, validated=validated)

    if tags:
        replace_note_tags(note=note, names=tags)

    recompute_tea_rating(tea_id=tea.id)

    logger.info("Note %s created by %s for tea %s", note.id, author.id, tea.id)
    return get_note(note_id=note.id, viewer=author)


@transaction.atomic
def update_note(
    *,
    note_id: UUID,
    user: User,
    tea_id: Any = UNSET,
    schema_id: Any = UNSET,
    overall_rating: Any = UNSET,
    is_rating_included: Any = UNSET,
    axis_values: Any = UNSET,
    memo: Any = UNSET,
    images: Any = UNSET,
    tags: Any = UNSET,
    is_public: Any = UNSET
) -> Note:
    """
    Apply a partial update to a note.

    Fields left at UNSET are not touched. For `axis_values` and `tags` an
    empty list is an explicit "clear all", distinct from leaving them out.

    Changing schema_id does not re-check stored axis values; only an
    `axis_values` list in the same call is validated against the new
    schema. All validation happens before stored axis values are deleted.

    Args:
        note_id: UUID of note to update
        user: User making the update (must be author)
        tea_id, schema_id, overall_rating, is_rating_included, axis_values,
        memo, images, tags, is_public: New values, or UNSET

    Returns:
        Updated Note annotated for the author

    Raises:
        NoteNotFoundError: If note doesn't exist
        UnauthorizedNoteActionError: If user is not the author
        TeaNotFoundError / SchemaNotFoundError: Unknown new tea/schema
        InvalidAxisError / AxisSchemaMismatchError / AxisValueOutOfRangeError:
            Rejected axis values (stored values left untouched)
        InvalidOverallRatingError: Overall rating out of range
    """
    note = _get_note_for_update(note_id)

    if note.author_id != user.id:
        raise UnauthorizedNoteActionError("You can only update your own notes")

    previous_tea_id = note.tea_id

    if tea_id is not UNSET and str(tea_id) != str(note.tea_id):
        note.tea = _resolve_tea(tea_id)

    schema = note.schema
    schema_changed = schema_id is not UNSET and str(schema_id) != str(note.schema_id)
    if schema_changed:
        schema = get_schema_by_id(schema_id=schema_id)
        note.schema = schema

    # Validate everything before the first write
    if overall_rating is not UNSET:
        note.overall_rating = validate_overall_rating(schema=schema, overall_rating=overall_rating)
    elif schema_changed:
        validate_overall_rating(schema=schema, overall_rating=note.overall_rating)

    validated = None
    if axis_values is not UNSET:
        validated = validate_axis_values(schema=schema, axis_values=axis_values or [])

    if is_rating_included is not UNSET:
        note.is_rating_included = True if is_rating_included is None else is_rating_included
    if memo is not UNSET:
        note.memo = memo
    if images is not UNSET:
        note.images = images
    if is_public is not UNSET:
        note.is_public = is_public

    note.save()

    if validated is not None:
        replace_axis_values(note=note, validated=validated)

    if tags is not UNSET:
        replace_note_tags(note=note, names=tags or [])

    # Fixed lock order when a note moves between teas
    for affected_tea_id in sorted({note.tea_id, previous_tea_id}, key=str):
        recompute_tea_rating(tea_id=affected_tea_id)

    logger.info("Note %s updated by %s", note.id, user.id)
    return get_note(note_id=note.id, viewer=user)


@transaction.atomic
def delete_note(*, note_id: UUID, user: User) -> None:
    """
    Delete a note and refresh its tea's aggregate rating.

    Stored images are removed first on a best-effort basis; a cleanup
    failure is logged and does not stop the delete. Axis values, tags,
    likes and bookmarks go with the note (CASCADE).

    Args:
        note_id: UUID of note to delete
        user: User making the deletion (must be author)

    Raises:
        NoteNotFoundError: If note doesn't exist
        UnauthorizedNoteActionError: If user is not the author
    """
    note = _get_note_for_update(note_id)

    if note.author_id != user.id:
        raise UnauthorizedNoteActionError("You can only delete your own notes")

    tea_id = note.tea_id

    delete_note_images(note.images)
    note.delete()

    recompute_tea_rating(tea_id=tea_id)

    logger.info("Note %s deleted by %s", note_id, user.id)
