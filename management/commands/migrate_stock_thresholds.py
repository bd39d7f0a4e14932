"""
Management command to copy the current low-stock threshold into every
stock item of an organization.

Usage:
    python manage.py migrate_stock_thresholds acme
    python manage.py migrate_stock_thresholds acme --dry-run
"""

from django.core.management.base import BaseCommand, CommandError

from storeman import inventory
from storeman.exceptions import NotFoundError


class Command(BaseCommand):
    """Migrate stock thresholds command."""

    help = 'Overwrite every stock item threshold with the organization setting'

    def add_arguments(self, parser):
        parser.add_argument('organization_slug')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show how many items would change without writing'
        )

    def handle(self, *args, **options):
        try:
            org = inventory.resolve_organization(options['organization_slug'])
        except NotFoundError as exc:
            raise CommandError(f"{exc.message}: {options['organization_slug']}") from exc

        count, threshold = inventory.migrate_stock_thresholds(org, dry_run=options['dry_run'])

        if options['dry_run']:
            self.stdout.write(f'{count} item(s) would be set to threshold {threshold}')
        else:
            self.stdout.write(
                self.style.SUCCESS(f'{count} item(s) set to threshold {threshold}')
            )
