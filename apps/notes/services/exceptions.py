"""
Domain exceptions for notes app.

Exception Hierarchy:
    NotesServiceError (base)
    ├── NoteNotFoundError            (not found)
    ├── TeaNotFoundError             (not found)
    ├── SchemaNotFoundError          (not found)
    ├── UnauthorizedNoteActionError  (forbidden)
    ├── NoteAccessDeniedError        (forbidden)
    ├── InvalidAxisError             (bad request)
    ├── AxisSchemaMismatchError      (bad request)
    ├── AxisValueOutOfRangeError     (bad request)
    └── InvalidOverallRatingError    (bad request)

Views map the three groups below to 404/403/400.
"""


class NotesServiceError(Exception):
    """Base exception for all notes service errors."""
    pass


class NoteNotFoundError(NotesServiceError):
    """Note does not exist."""
    pass


class TeaNotFoundError(NotesServiceError):
    """Referenced tea does not exist."""
    pass


class SchemaNotFoundError(NotesServiceError):
    """Referenced rating schema does not exist."""
    pass


class UnauthorizedNoteActionError(NotesServiceError):
    """User cannot modify or delete a note they did not write."""
    pass


class NoteAccessDeniedError(NotesServiceError):
    """Private note accessed by someone other than its author."""
    pass


class InvalidAxisError(NotesServiceError):
    """Axis ids are unknown or repeated."""
    pass


class AxisSchemaMismatchError(NotesServiceError):
    """Axis belongs to a different schema than the note."""
    pass


class AxisValueOutOfRangeError(NotesServiceError):
    """Axis value lies outside the axis min/max range."""
    pass


class InvalidOverallRatingError(NotesServiceError):
    """Overall rating lies outside the schema's overall range."""
    pass


NOT_FOUND_ERRORS = (NoteNotFoundError, TeaNotFoundError, SchemaNotFoundError)
FORBIDDEN_ERRORS = (UnauthorizedNoteActionError, NoteAccessDeniedError)
BAD_REQUEST_ERRORS = (
    InvalidAxisError,
    AxisSchemaMismatchError,
    AxisValueOutOfRangeError,
    InvalidOverallRatingError,
)
