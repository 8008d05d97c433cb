# Widens stored ratings to four integer digits and bounds schema and axis
# ranges to what those columns hold.

from decimal import Decimal
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import migrations, models


def _bounded():
    return models.SmallIntegerField(validators=[MinValueValidator(-9999), MaxValueValidator(9999)])


class Migration(migrations.Migration):

    dependencies = [
        ('notes', '0002_seed_standard_schema'),
    ]

    operations = [
        migrations.AlterField(
            model_name='note',
            name='overall_rating',
            field=models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True, validators=[MinValueValidator(Decimal('0.0'))]),
        ),
        migrations.AlterField(
            model_name='noteaxisvalue',
            name='value',
            field=models.DecimalField(decimal_places=1, max_digits=5),
        ),
        migrations.AlterField(
            model_name='ratingschema',
            name='overall_min_value',
            field=_bounded(),
        ),
        migrations.AlterField(
            model_name='ratingschema',
            name='overall_max_value',
            field=_bounded(),
        ),
        migrations.AlterField(
            model_name='ratingaxis',
            name='min_value',
            field=_bounded(),
        ),
        migrations.AlterField(
            model_name='ratingaxis',
            name='max_value',
            field=_bounded(),
        ),
    ]
