"""Tag management service - normalized tags attached to notes."""

import logging

from django.db import transaction, IntegrityError
from django.db.models import QuerySet, Count, Q
from typing import Iterable

from apps.notes.models import Note, NoteTag, Tag

logger = logging.getLogger(__name__)

TAG_MAX_LENGTH = 50


def normalize_tag_name(name: str) -> str:
    """Trim, collapse inner whitespace and lower-case a tag name."""
    return ' '.join(str(name).split()).lower()[:TAG_MAX_LENGTH].strip()


def normalize_tag_names(names: Iterable[str]) -> list[str]:
    """
    Normalize tag names, dropping blanks and duplicates.

    First occurrence wins, so the submitted order is preserved.
    """
    seen = set()
    result = []
    for name in names:
        normalized = normalize_tag_name(name)
        if normalized and normalized not in seen:
            seen.add(normalized)
            result.append(normalized)
    return result


def get_or_create_tag(*, name: str) -> Tag:
    """
    Find-or-create a tag by its normalized name.

    Handles the race where two requests create the same tag at once:
    the loser of the unique-name race re-reads the winner's row.
    """
    try:
        with transaction.atomic():
            tag, _ = Tag.objects.get_or_create(name=name)
    except IntegrityError:
        tag = Tag.objects.get(name=name)
    return tag


@transaction.atomic
def replace_note_tags(*, note: Note, names: Iterable[str]) -> list[Tag]:
    """
    Set a note's tags to exactly the given names.

    Existing associations are cleared first, then the normalized set is
    inserted, so calling this with an empty list removes every tag.

    Args:
        note: Note whose tags are replaced
        names: Raw tag names as submitted

    Returns:
        List of Tag instances now attached to the note
    """
    tags = [get_or_create_tag(name=name) for name in normalize_tag_names(names)]

    NoteTag.objects.filter(note=note).delete()
    NoteTag.objects.bulk_create([NoteTag(note=note, tag=tag) for tag in tags])

    return tags


def get_popular_tags(*, limit: int = 20) -> QuerySet[Tag]:
    """
    Get most frequently used tags.

    Only tags on public notes are counted so private notes do not leak
    through the tag cloud.

    Args:
        limit: Maximum number of tags to return (default: 20)

    Returns:
        QuerySet of Tag instances annotated with 'usage_count',
        ordered by usage count descending
    """
    return (
        Tag.objects
        .annotate(usage_count=Count('note_tags', filter=Q(note_tags__note__is_public=True)))
        .filter(usage_count__gt=0)
        .order_by('-usage_count', 'name')[:limit]
    )
