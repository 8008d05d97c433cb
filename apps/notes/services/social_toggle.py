"""Social toggle service - likes and bookmarks on notes.

A like/bookmark is a (note, user) join row protected by a unique
constraint. Toggling reads the row and deletes or inserts it inside one
transaction.

IMPORTANT: the IntegrityError catch in `_flip_membership` is intentional.
Two identical requests (double tap, client retry) can both see "absent"
and both insert; the unique constraint lets exactly one insert win and the
loser must report the same end state instead of failing. Removing the
catch brings back 500s on double-clicks.
"""

import logging

from dataclasses import dataclass
from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import Model
from typing import Type
from uuid import UUID

from apps.accounts.models import User
from apps.notes.models import Note, NoteLike, NoteBookmark
from .exceptions import NoteNotFoundError, NoteAccessDeniedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeToggleResult:
    liked: bool
    like_count: int


@dataclass(frozen=True)
class BookmarkToggleResult:
    bookmarked: bool


def _get_note_for_toggle(*, note_id: UUID, user: User) -> Note:
    try:
        note = Note.objects.select_for_update().get(id=note_id)
    except (Note.DoesNotExist, ValidationError):
        raise NoteNotFoundError(f"Note {note_id} not found")

    if not note.is_public and note.author_id != user.id:
        raise NoteAccessDeniedError("Only the author can interact with a private note")

    return note


def _flip_membership(*, model: Type[Model], note: Note, user: User) -> bool:
    """
    Flip the (note, user) row of `model` and return the new state.

    Must be called inside an atomic block that already holds the note.
    """
    existing = model.objects.filter(note=note, user=user).first()
    if existing is not None:
        existing.delete()
        return False

    try:
        # Savepoint so a duplicate-key error does not poison the outer
        # transaction (PostgreSQL aborts it otherwise).
        with transaction.atomic():
            model.objects.create(note=note, user=user)
    except IntegrityError:
        # A concurrent request inserted the same pair after our read.
        # The row exists, which is exactly the state this call wanted.
        logger.info(
            "Concurrent %s insert for note %s user %s; treating as success",
            model.__name__, note.id, user.id,
        )
    return True


@transaction.atomic
def toggle_like(*, note_id: UUID, user: User) -> LikeToggleResult:
    """
    Like or unlike a note.

    This operation:
    1. Loads and locks the note (404 if missing)
    2. Rejects non-authors on private notes
    3. Deletes the user's like if present, inserts it otherwise
    4. Counts likes inside the same transaction

    Args:
        note_id: UUID of note
        user: User toggling the like

    Returns:
        LikeToggleResult(liked, like_count)

    Raises:
        NoteNotFoundError: If note doesn't exist
        NoteAccessDeniedError: If note is private and user is not the author
    """
    note = _get_note_for_toggle(note_id=note_id, user=user)
    liked = _flip_membership(model=NoteLike, note=note, user=user)
    like_count = NoteLike.objects.filter(note=note).count()

    return LikeToggleResult(liked=liked, like_count=like_count)


@transaction.atomic
def toggle_bookmark(*, note_id: UUID, user: User) -> BookmarkToggleResult:
    """
    Bookmark or un-bookmark a note.

    Same flow as toggle_like; no aggregate count is kept for bookmarks.

    Raises:
        NoteNotFoundError: If note doesn't exist
        NoteAccessDeniedError: If note is private and user is not the author
    """
    note = _get_note_for_toggle(note_id=note_id, user=user)
    bookmarked = _flip_membership(model=NoteBookmark, note=note, user=user)

    return BookmarkToggleResult(bookmarked=bookmarked)
