"""
Management command to rebuild tea rating aggregates from notes.

Usage:
    python manage.py recalculate_tea_ratings
    python manage.py recalculate_tea_ratings --tea <uuid> --tea <uuid>
"""

from django.core.management.base import BaseCommand, CommandError

from apps.notes.services import recompute_tea_rating
from apps.notes.services.exceptions import TeaNotFoundError
from apps.teas.models import Tea


class Command(BaseCommand):
    help = 'Recalculate average_rating and review_count of teas from their notes'

    def add_arguments(self, parser):
        parser.add_argument(
            '--tea',
            action='append',
            dest='tea_ids',
            default=[],
            help='Only recalculate this tea (repeatable)',
        )

    def handle(self, *args, **options):
        tea_ids = options['tea_ids'] or list(Tea.objects.values_list('id', flat=True))

        for tea_id in tea_ids:
            try:
                tea = recompute_tea_rating(tea_id=tea_id)
            except TeaNotFoundError as e:
                raise CommandError(str(e))

            self.stdout.write(f'  {tea.name}: {tea.average_rating} ({tea.review_count} notes)')

        self.stdout.write(self.style.SUCCESS(f'Recalculated ratings for {len(tea_ids)} teas'))
