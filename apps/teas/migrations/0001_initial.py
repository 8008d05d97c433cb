# Generated manually for teas app

import uuid
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Tea',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(db_index=True, max_length=200)),
                ('year', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('type', models.CharField(max_length=50)),
                ('seller', models.CharField(blank=True, max_length=200)),
                ('origin', models.CharField(blank=True, max_length=200)),
                ('average_rating', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=3, validators=[MinValueValidator(Decimal('0.00'))])),
                ('review_count', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'teas',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['type'], name='teas_type_idx'),
                    models.Index(fields=['average_rating'], name='teas_average_rating_idx'),
                    models.Index(fields=['created_at'], name='teas_created_at_idx'),
                ],
            },
        ),
    ]
