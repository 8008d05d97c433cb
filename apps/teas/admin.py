from django.contrib import admin
from .models import Tea


@admin.register(Tea)
class TeaAdmin(admin.ModelAdmin):
    """Admin interface for Teas."""

    list_display = [
        'name',
        'year',
        'type',
        'seller',
        'average_rating',
        'review_count',
        'created_at'
    ]
    list_filter = ['type', 'created_at']
    search_fields = ['name', 'seller', 'origin']
    # Aggregates are maintained from notes only
    readonly_fields = ['average_rating', 'review_count', 'created_at', 'updated_at']
    ordering = ['-created_at']

    actions = ['recalculate_ratings']

    def recalculate_ratings(self, request, queryset):
        """Recompute aggregate ratings from the teas' notes."""
        from apps.notes.services import recompute_tea_rating

        count = 0
        for tea in queryset:
            recompute_tea_rating(tea_id=tea.id)
            count += 1
        self.message_user(request, f"Recalculated ratings for {count} teas")
    recalculate_ratings.short_description = "Recalculate tea ratings"
