"""
Seed the import calculation parameters with their defaults.

Usage:
    python manage.py init_import_settings
    python manage.py init_import_settings --overwrite
"""

from django.core.management.base import BaseCommand

from apps.imports.services import init_import_settings


class Command(BaseCommand):
    help = 'Create missing import calculation settings with default values'

    def add_arguments(self, parser):
        parser.add_argument(
            '--overwrite',
            action='store_true',
            help='Reset existing settings to their defaults',
        )

    def handle(self, *args, **options):
        written = init_import_settings(overwrite=options['overwrite'])
        self.stdout.write(self.style.SUCCESS(f'{written} import setting(s) written'))
