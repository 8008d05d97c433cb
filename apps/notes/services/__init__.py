"""
Notes services - Business logic layer.

This package contains all business operations for the notes app:
- Rating schema registry
- Axis value validation
- Note lifecycle (create, read, update, delete)
- Tea aggregate rating recomputation
- Like / bookmark toggles
- Tag management
"""

from .schema_registry import (
    get_schema_by_id,
    get_active_schemas,
    get_schema_axes,
)

from .axis_validation import (
    ValidatedAxisValue,
    validate_axis_values,
    validate_overall_rating,
)

from .note_management import (
    UNSET,
    annotate_social_state,
    replace_axis_values,
    create_note,
    get_note,
    list_notes,
    update_note,
    delete_note,
)

from .rating_aggregation import (
    compute_tea_rating,
    recompute_tea_rating,
)

from .social_toggle import (
    LikeToggleResult,
    BookmarkToggleResult,
    toggle_like,
    toggle_bookmark,
)

from .tag_management import (
    normalize_tag_name,
    normalize_tag_names,
    replace_note_tags,
    get_popular_tags,
)

from .image_cleanup import (
    image_key_from_url,
    delete_note_images,
)

from .exceptions import (
    NotesServiceError,
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

__all__ = [
    # Schema Registry
    'get_schema_by_id',
    'get_active_schemas',
    'get_schema_axes',
    # Axis Validation
    'ValidatedAxisValue',
    'validate_axis_values',
    'validate_overall_rating',
    # Note Lifecycle
    'UNSET',
    'annotate_social_state',
    'replace_axis_values',
    'create_note',
    'get_note',
    'list_notes',
    'update_note',
    'delete_note',
    # Aggregate Rating
    'compute_tea_rating',
    'recompute_tea_rating',
    # Social Toggles
    'LikeToggleResult',
    'BookmarkToggleResult',
    'toggle_like',
    'toggle_bookmark',
    # Tags
    'normalize_tag_name',
    'normalize_tag_names',
    'replace_note_tags',
    'get_popular_tags',
    # Images
    'image_key_from_url',
    'delete_note_images',
    # Exceptions
    'NotesServiceError',
    'NoteNotFoundError',
    'TeaNotFoundError',
    'SchemaNotFoundError',
    'UnauthorizedNoteActionError',
    'NoteAccessDeniedError',
    'InvalidAxisError',
    'AxisSchemaMismatchError',
    'AxisValueOutOfRangeError',
    'InvalidOverallRatingError',
]
