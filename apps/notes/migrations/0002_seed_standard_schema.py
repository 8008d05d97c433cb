# Seeds the default STANDARD v1.0.0 rating schema and its five axes.

from decimal import Decimal
from django.db import migrations


STANDARD_AXES = [
    ('RICHNESS', '풍부함', 'Richness', '차의 풍부한 맛과 향', 'Richness of taste and aroma'),
    ('STRENGTH', '강도', 'Strength', '차의 강한 맛', 'Strength of taste'),
    ('SMOOTHNESS', '부드러움', 'Smoothness', '차의 부드러운 맛', 'Smoothness of taste'),
    ('CLARITY', '명확함', 'Clarity', '차의 명확한 맛', 'Clarity of taste'),
    ('COMPLEXITY', '복잡성', 'Complexity', '차의 복잡한 맛', 'Complexity of taste'),
]


def create_standard_schema(apps, schema_editor):
    RatingSchema = apps.get_model('notes', 'RatingSchema')
    RatingAxis = apps.get_model('notes', 'RatingAxis')

    schema, created = RatingSchema.objects.get_or_create(
        code='STANDARD',
        version='1.0.0',
        defaults={
            'name_ko': '차록 표준 평가',
            'name_en': 'ChaLog Standard Rating',
            'description_ko': '차록의 기본 평가 축 세트',
            'description_en': 'ChaLog default rating axis set',
            'overall_min_value': 1,
            'overall_max_value': 5,
            'overall_step': Decimal('0.5'),
            'is_active': True,
        },
    )
    if not created:
        return

    RatingAxis.objects.bulk_create([
        RatingAxis(
            schema=schema,
            code=code,
            name_ko=name_ko,
            name_en=name_en,
            description_ko=description_ko,
            description_en=description_en,
            min_value=1,
            max_value=5,
            step_value=Decimal('1.0'),
            display_order=order,
            is_required=True,
        )
        for order, (code, name_ko, name_en, description_ko, description_en)
        in enumerate(STANDARD_AXES, start=1)
    ])


def remove_standard_schema(apps, schema_editor):
    RatingSchema = apps.get_model('notes', 'RatingSchema')
    RatingSchema.objects.filter(code='STANDARD', version='1.0.0', notes__isnull=True).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('notes', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_standard_schema, remove_standard_schema),
    ]
