# ==========================================
# apps/notes/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
import uuid

# Widest score a schema or axis may span; matches the stored rating columns
RATING_LIMIT = 9999


class RatingSchema(models.Model):
    """Versioned evaluation template (overall range + ordered axes)."""

    code = models.CharField(max_length=100)
    version = models.CharField(max_length=50)
    name_ko = models.CharField(max_length=255)
    name_en = models.CharField(max_length=255)
    description_ko = models.TextField(null=True, blank=True)
    description_en = models.TextField(null=True, blank=True)
    overall_min_value = models.SmallIntegerField(validators=[MinValueValidator(-RATING_LIMIT), MaxValueValidator(RATING_LIMIT)])
    overall_max_value = models.SmallIntegerField(validators=[MinValueValidator(-RATING_LIMIT), MaxValueValidator(RATING_LIMIT)])
    overall_step = models.DecimalField(max_digits=2, decimal_places=1)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rating_schema'
        unique_together = [['code', 'version']]
        indexes = [
            models.Index(fields=['is_active'], name='rating_schema_active_idx'),
        ]
        ordering = ['code', 'version']

    def __str__(self):
        return f"{self.code} v{self.version}"


class RatingAxis(models.Model):
    """One scored dimension of a rating schema."""

    schema = models.ForeignKey(RatingSchema, on_delete=models.CASCADE, related_name='axes')
    code = models.CharField(max_length=100, db_index=True)
    name_ko = models.CharField(max_length=255)
    name_en = models.CharField(max_length=255)
    description_ko = models.TextField(null=True, blank=True)
    description_en = models.TextField(null=True, blank=True)
    min_value = models.SmallIntegerField(validators=[MinValueValidator(-RATING_LIMIT), MaxValueValidator(RATING_LIMIT)])
    max_value = models.SmallIntegerField(validators=[MinValueValidator(-RATING_LIMIT), MaxValueValidator(RATING_LIMIT)])
    step_value = models.DecimalField(max_digits=2, decimal_places=1)
    display_order = models.PositiveIntegerField()
    is_required = models.BooleanField(default=False)
    tea_type = models.CharField(max_length=50, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rating_axis'
        ordering = ['display_order']

    def __str__(self):
        return f"{self.schema.code}/{self.code}"


class Tag(models.Model):
    """Normalized free-form tag shared by all notes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=50, unique=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tags'
        ordering = ['name']

    def __str__(self):
        return self.name


class Note(models.Model):
    """Tasting note for a tea, scored against one rating schema."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tea = models.ForeignKey('teas.Tea', on_delete=models.CASCADE, related_name='notes')
    author = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='notes')
    schema = models.ForeignKey(RatingSchema, on_delete=models.PROTECT, related_name='notes')
    overall_rating = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True, validators=[MinValueValidator(Decimal('0.0'))])
    is_rating_included = models.BooleanField(default=True)
    memo = models.TextField(null=True, blank=True)
    images = models.JSONField(null=True, blank=True)
    is_public = models.BooleanField(default=False)
    tags = models.ManyToManyField(Tag, through='NoteTag', blank=True, related_name='notes')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'notes'
        indexes = [
            models.Index(fields=['tea', 'is_rating_included'], name='notes_tea_included_idx'),
            models.Index(fields=['author', 'created_at'], name='notes_author_created_idx'),
            models.Index(fields=['is_public', 'created_at'], name='notes_public_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.author.get_display_name()} - {self.tea.name}"

    def is_visible_to(self, user) -> bool:
        """Public notes are visible to everyone, private ones to the author only."""
        if self.is_public:
            return True
        return user is not None and self.author_id == user.id


class NoteAxisValue(models.Model):
    """Value submitted for one axis of a note."""

    note = models.ForeignKey(Note, on_delete=models.CASCADE, related_name='axis_values')
    axis = models.ForeignKey(RatingAxis, on_delete=models.CASCADE, related_name='note_values')
    value = models.DecimalField(max_digits=5, decimal_places=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'note_axis_value'
        unique_together = [['note', 'axis']]
        indexes = [
            models.Index(fields=['axis', 'value'], name='note_axis_value_axis_val_idx'),
        ]
        ordering = ['axis__display_order']

    def __str__(self):
        return f"{self.axis.code}={self.value}"


class NoteTag(models.Model):
    """Join row between a note and a tag."""

    note = models.ForeignKey(Note, on_delete=models.CASCADE, related_name='note_tags')
    tag = models.ForeignKey(Tag, on_delete=models.CASCADE, related_name='note_tags')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'note_tags'
        unique_together = [['note', 'tag']]


class NoteLike(models.Model):
    """A user's like on a note. Row existence is the liked state."""

    note = models.ForeignKey(Note, on_delete=models.CASCADE, related_name='likes')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='note_likes')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'note_likes'
        unique_together = [['note', 'user']]
        indexes = [
            models.Index(fields=['user', 'created_at'], name='note_likes_user_created_idx'),
        ]


class NoteBookmark(models.Model):
    """A user's bookmark on a note. Row existence is the bookmarked state."""

    note = models.ForeignKey(Note, on_delete=models.CASCADE, related_name='bookmarks')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='note_bookmarks')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'note_bookmarks'
        unique_together = [['note', 'user']]
        indexes = [
            models.Index(fields=['user', 'created_at'], name='note_bookmarks_user_crt_idx'),
        ]
