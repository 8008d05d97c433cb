# Widens the aggregate column so schemas scored above 9.99 can be stored.

from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('teas', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='tea',
            name='average_rating',
            field=models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=6, validators=[MinValueValidator(Decimal('0.00'))]),
        ),
    ]
