# Generated manually for notes app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('teas', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='RatingSchema',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=100)),
                ('version', models.CharField(max_length=50)),
                ('name_ko', models.CharField(max_length=255)),
                ('name_en', models.CharField(max_length=255)),
                ('description_ko', models.TextField(blank=True, null=True)),
                ('description_en', models.TextField(blank=True, null=True)),
                ('overall_min_value', models.SmallIntegerField()),
                ('overall_max_value', models.SmallIntegerField()),
                ('overall_step', models.DecimalField(decimal_places=1, max_digits=2)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'rating_schema',
                'ordering': ['code', 'version'],
                'unique_together': {('code', 'version')},
                'indexes': [models.Index(fields=['is_active'], name='rating_schema_active_idx')],
            },
        ),
        migrations.CreateModel(
            name='RatingAxis',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(db_index=True, max_length=100)),
                ('name_ko', models.CharField(max_length=255)),
                ('name_en', models.CharField(max_length=255)),
                ('description_ko', models.TextField(blank=True, null=True)),
                ('description_en', models.TextField(blank=True, null=True)),
                ('min_value', models.SmallIntegerField()),
                ('max_value', models.SmallIntegerField()),
                ('step_value', models.DecimalField(decimal_places=1, max_digits=2)),
                ('display_order', models.PositiveIntegerField()),
                ('is_required', models.BooleanField(default=False)),
                ('tea_type', models.CharField(blank=True, max_length=50, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('schema', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='axes', to='notes.ratingschema')),
            ],
            options={
                'db_table': 'rating_axis',
                'ordering': ['display_order'],
            },
        ),
        migrations.CreateModel(
            name='Tag',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(db_index=True, max_length=50, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'tags',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Note',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('overall_rating', models.DecimalField(blank=True, decimal_places=1, max_digits=3, null=True, validators=[MinValueValidator(Decimal('0.0'))])),
                ('is_rating_included', models.BooleanField(default=True)),
                ('memo', models.TextField(blank=True, null=True)),
                ('images', models.JSONField(blank=True, null=True)),
                ('is_public', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('author', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notes', to=settings.AUTH_USER_MODEL)),
                ('schema', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='notes', to='notes.ratingschema')),
                ('tea', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notes', to='teas.tea')),
            ],
            options={
                'db_table': 'notes',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='NoteTag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('note', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='note_tags', to='notes.note')),
                ('tag', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='note_tags', to='notes.tag')),
            ],
            options={
                'db_table': 'note_tags',
                'unique_together': {('note', 'tag')},
            },
        ),
        migrations.AddField(
            model_name='note',
            name='tags',
            field=models.ManyToManyField(blank=True, related_name='notes', through='notes.NoteTag', to='notes.tag'),
        ),
        migrations.AddIndex(
            model_name='note',
            index=models.Index(fields=['tea', 'is_rating_included'], name='notes_tea_included_idx'),
        ),
        migrations.AddIndex(
            model_name='note',
            index=models.Index(fields=['author', 'created_at'], name='notes_author_created_idx'),
        ),
        migrations.AddIndex(
            model_name='note',
            index=models.Index(fields=['is_public', 'created_at'], name='notes_public_created_idx'),
        ),
        migrations.CreateModel(
            name='NoteAxisValue',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('value', models.DecimalField(decimal_places=1, max_digits=3)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('axis', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='note_values', to='notes.ratingaxis')),
                ('note', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='axis_values', to='notes.note')),
            ],
            options={
                'db_table': 'note_axis_value',
                'ordering': ['axis__display_order'],
                'unique_together': {('note', 'axis')},
                'indexes': [models.Index(fields=['axis', 'value'], name='note_axis_value_axis_val_idx')],
            },
        ),
        migrations.CreateModel(
            name='NoteLike',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('note', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='likes', to='notes.note')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='note_likes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'note_likes',
                'unique_together': {('note', 'user')},
                'indexes': [models.Index(fields=['user', 'created_at'], name='note_likes_user_created_idx')],
            },
        ),
        migrations.CreateModel(
            name='NoteBookmark',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('note', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bookmarks', to='notes.note')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='note_bookmarks', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'note_bookmarks',
                'unique_together': {('note', 'user')},
                'indexes': [models.Index(fields=['user', 'created_at'], name='note_bookmarks_user_crt_idx')],
            },
        ),
    ]
