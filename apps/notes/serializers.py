from rest_framework import serializers
from .models import Note, NoteAxisValue, RatingAxis, RatingSchema, Tag
from apps.accounts.models import User
from apps.teas.models import Tea


# =============================================================================
# Schema registry
# =============================================================================

class RatingAxisSerializer(serializers.ModelSerializer):
    """Axis definition as shown to note writers."""

    schemaId = serializers.IntegerField(source='schema_id', read_only=True)
    nameKo = serializers.CharField(source='name_ko', read_only=True)
    nameEn = serializers.CharField(source='name_en', read_only=True)
    descriptionKo = serializers.CharField(source='description_ko', read_only=True)
    descriptionEn = serializers.CharField(source='description_en', read_only=True)
    minValue = serializers.IntegerField(source='min_value', read_only=True)
    maxValue = serializers.IntegerField(source='max_value', read_only=True)
    stepValue = serializers.DecimalField(source='step_value', max_digits=2, decimal_places=1, coerce_to_string=False, read_only=True)
    displayOrder = serializers.IntegerField(source='display_order', read_only=True)
    isRequired = serializers.BooleanField(source='is_required', read_only=True)

    class Meta:
        model = RatingAxis
        fields = [
            'id',
            'schemaId',
            'code',
            'nameKo',
            'nameEn',
            'descriptionKo',
            'descriptionEn',
            'minValue',
            'maxValue',
            'stepValue',
            'displayOrder',
            'isRequired',
        ]
        read_only_fields = fields


class RatingSchemaSerializer(serializers.ModelSerializer):
    """Schema with its axes in display order."""

    nameKo = serializers.CharField(source='name_ko', read_only=True)
    nameEn = serializers.CharField(source='name_en', read_only=True)
    descriptionKo = serializers.CharField(source='description_ko', read_only=True)
    descriptionEn = serializers.CharField(source='description_en', read_only=True)
    overallMinValue = serializers.IntegerField(source='overall_min_value', read_only=True)
    overallMaxValue = serializers.IntegerField(source='overall_max_value', read_only=True)
    overallStep = serializers.DecimalField(source='overall_step', max_digits=2, decimal_places=1, coerce_to_string=False, read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    axes = RatingAxisSerializer(many=True, read_only=True)

    class Meta:
        model = RatingSchema
        fields = [
            'id',
            'code',
            'version',
            'nameKo',
            'nameEn',
            'descriptionKo',
            'descriptionEn',
            'overallMinValue',
            'overallMaxValue',
            'overallStep',
            'isActive',
            'axes',
        ]
        read_only_fields = fields


# =============================================================================
# Notes (read)
# =============================================================================

class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal author info for nested serialization."""

    name = serializers.SerializerMethodField()
    profileImageUrl = serializers.CharField(source='profile_image_url', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'profileImageUrl']
        read_only_fields = fields

    def get_name(self, obj):
        return obj.get_display_name()


class TeaMinimalSerializer(serializers.ModelSerializer):
    """Minimal tea info for nested serialization."""

    averageRating = serializers.DecimalField(source='average_rating', max_digits=6, decimal_places=2, coerce_to_string=False, read_only=True)
    reviewCount = serializers.IntegerField(source='review_count', read_only=True)

    class Meta:
        model = Tea
        fields = ['id', 'name', 'year', 'type', 'seller', 'origin', 'averageRating', 'reviewCount']
        read_only_fields = fields


class NoteAxisValueSerializer(serializers.ModelSerializer):
    """Stored axis value with the axis it scores."""

    axisId = serializers.IntegerField(source='axis_id', read_only=True)
    value = serializers.DecimalField(max_digits=5, decimal_places=1, coerce_to_string=False, read_only=True)
    axis = RatingAxisSerializer(read_only=True)

    class Meta:
        model = NoteAxisValue
        fields = ['id', 'axisId', 'value', 'axis']
        read_only_fields = fields


class NoteSerializer(serializers.ModelSerializer):
    """Hydrated note: axis values, tags and per-viewer social state."""

    teaId = serializers.UUIDField(source='tea_id', read_only=True)
    tea = TeaMinimalSerializer(read_only=True)
    userId = serializers.UUIDField(source='author_id', read_only=True)
    user = UserMinimalSerializer(source='author', read_only=True)
    schemaId = serializers.IntegerField(source='schema_id', read_only=True)
    overallRating = serializers.DecimalField(source='overall_rating', max_digits=5, decimal_places=1, coerce_to_string=False, allow_null=True, read_only=True)
    isRatingIncluded = serializers.BooleanField(source='is_rating_included', read_only=True)
    axisValues = NoteAxisValueSerializer(source='axis_values', many=True, read_only=True)
    tags = serializers.SlugRelatedField(many=True, read_only=True, slug_field='name')
    isPublic = serializers.BooleanField(source='is_public', read_only=True)
    likeCount = serializers.IntegerField(source='like_count', read_only=True, default=0)
    isLiked = serializers.BooleanField(source='is_liked', read_only=True, default=False)
    isBookmarked = serializers.BooleanField(source='is_bookmarked', read_only=True, default=False)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Note
        fields = [
            'id',
            'teaId',
            'tea',
            'userId',
            'user',
            'schemaId',
            'overallRating',
            'isRatingIncluded',
            'axisValues',
            'memo',
            'images',
            'tags',
            'isPublic',
            'likeCount',
            'isLiked',
            'isBookmarked',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields


# =============================================================================
# Notes (write)
# =============================================================================

class AxisValueInputSerializer(serializers.Serializer):
    axisId = serializers.IntegerField(source='axis_id')
    value = serializers.DecimalField(max_digits=5, decimal_places=1)


class NoteWriteSerializer(serializers.Serializer):
    """
    Partial note payload.

    validated_data keys match the note service keyword arguments, and only
    fields present in the request appear in it.
    """

    teaId = serializers.UUIDField(source='tea_id', required=False)
    schemaId = serializers.IntegerField(source='schema_id', required=False)
    overallRating = serializers.DecimalField(source='overall_rating', max_digits=5, decimal_places=1, required=False, allow_null=True)
    isRatingIncluded = serializers.BooleanField(source='is_rating_included', required=False)
    axisValues = AxisValueInputSerializer(source='axis_values', many=True, required=False)
    memo = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    images = serializers.ListField(child=serializers.URLField(max_length=500), required=False, allow_null=True)
    tags = serializers.ListField(child=serializers.CharField(max_length=50, allow_blank=True), required=False)
    isPublic = serializers.BooleanField(source='is_public', required=False)


class NoteCreateSerializer(NoteWriteSerializer):
    """Note creation payload: tea, schema and visibility are mandatory."""

    teaId = serializers.UUIDField(source='tea_id')
    schemaId = serializers.IntegerField(source='schema_id')
    isPublic = serializers.BooleanField(source='is_public')


class NoteListQuerySerializer(serializers.Serializer):
    """Query parameters accepted by GET /api/notes/."""

    userId = serializers.UUIDField(source='user_id', required=False)
    public = serializers.BooleanField(source='is_public', required=False, allow_null=True, default=None)
    teaId = serializers.UUIDField(source='tea_id', required=False)
    bookmarked = serializers.BooleanField(required=False, default=False)


# =============================================================================
# Toggles and tags
# =============================================================================

class LikeToggleSerializer(serializers.Serializer):
    liked = serializers.BooleanField()
    likeCount = serializers.IntegerField(source='like_count')


class BookmarkToggleSerializer(serializers.Serializer):
    bookmarked = serializers.BooleanField()


class TagSerializer(serializers.ModelSerializer):
    """Tag with its usage count on public notes."""

    usageCount = serializers.IntegerField(source='usage_count', read_only=True, default=0)

    class Meta:
        model = Tag
        fields = ['id', 'name', 'usageCount']
        read_only_fields = fields
