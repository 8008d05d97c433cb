# ==========================================
# apps/teas/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class Tea(models.Model):
    """A tea that notes are written about."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, db_index=True)
    year = models.PositiveSmallIntegerField(null=True, blank=True)
    type = models.CharField(max_length=50)
    seller = models.CharField(max_length=200, blank=True)
    origin = models.CharField(max_length=200, blank=True)
    # Derived from notes; written only by services.update_tea_rating
    average_rating = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0.00'), validators=[MinValueValidator(Decimal('0.00'))])
    review_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'teas'
        indexes = [
            models.Index(fields=['type'], name='teas_type_idx'),
            models.Index(fields=['average_rating'], name='teas_average_rating_idx'),
            models.Index(fields=['created_at'], name='teas_created_at_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        if self.year:
            return f"{self.name} ({self.year})"
        return self.name
