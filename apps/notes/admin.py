from django.contrib import admin
from django.db.models import Count
from .models import Note, NoteAxisValue, RatingAxis, RatingSchema, Tag
from .services import recompute_tea_rating


class RatingAxisInline(admin.TabularInline):
    model = RatingAxis
    extra = 0
    ordering = ['display_order']


@admin.register(RatingSchema)
class RatingSchemaAdmin(admin.ModelAdmin):
    """Admin interface for rating schemas."""

    list_display = ['code', 'version', 'name_en', 'overall_min_value', 'overall_max_value', 'overall_step', 'is_active']
    list_filter = ['is_active']
    search_fields = ['code', 'name_ko', 'name_en']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [RatingAxisInline]


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    """Admin interface for Tags."""

    list_display = ['name', 'usage_count', 'created_at']
    search_fields = ['name']
    ordering = ['name']

    def usage_count(self, obj):
        """Show how many notes use the tag."""
        return obj.usage_count
    usage_count.short_description = 'Times Used'
    usage_count.admin_order_field = 'usage_count'

    def get_queryset(self, request):
        """Optimize query with annotation."""
        qs = super().get_queryset(request)
        return qs.annotate(usage_count=Count('note_tags'))


class NoteAxisValueInline(admin.TabularInline):
    model = NoteAxisValue
    extra = 0
    readonly_fields = ['axis', 'value']
    can_delete = False


@admin.register(Note)
class NoteAdmin(admin.ModelAdmin):
    """Admin interface for tasting notes."""

    list_display = [
        'tea',
        'author',
        'schema',
        'overall_rating',
        'is_rating_included',
        'is_public',
        'created_at'
    ]
    list_filter = [
        'is_public',
        'is_rating_included',
        'schema',
        'created_at'
    ]
    search_fields = [
        'tea__name',
        'author__email',
        'memo'
    ]
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    inlines = [NoteAxisValueInline]

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('author', 'tea', 'schema')

    actions = ['recalculate_tea_ratings']

    def recalculate_tea_ratings(self, request, queryset):
        """Recalculate aggregate ratings for the selected notes' teas."""
        tea_ids = set(queryset.values_list('tea_id', flat=True))
        for tea_id in tea_ids:
            recompute_tea_rating(tea_id=tea_id)
        self.message_user(request, f"Recalculated ratings for {len(tea_ids)} teas")
    recalculate_tea_ratings.short_description = "Recalculate tea ratings"
