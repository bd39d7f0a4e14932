"""
Management command to check stock items against their movement ledger.

Usage:
    python manage.py audit_stock_items
    python manage.py audit_stock_items --org acme
    python manage.py audit_stock_items --fix
"""

from django.core.management.base import BaseCommand, CommandError

from storeman.models import Organization, StockItem


class Command(BaseCommand):
    """Ledger replay audit command."""

    help = 'Replay movements and report (or repair) stock items whose quantity differs'

    def add_arguments(self, parser):
        parser.add_argument('--org', dest='org', help='Organization slug (default: all)')
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Overwrite drifted quantities with the ledger value'
        )

    def handle(self, *args, **options):
        items = StockItem.objects.select_related('product', 'location').order_by('pk')

        if options['org']:
            org = Organization.objects.filter(slug=options['org']).first()
            if org is None:
                raise CommandError(f"Organization not found: {options['org']}")
            items = items.filter(organization=org)

        checked = drifted = 0
        for item in items.iterator():
            checked += 1
            expected = item.ledger_quantity()
            if expected == item.quantity:
                continue

            drifted += 1
            self.stdout.write(
                self.style.WARNING(f'{item}: stored {item.quantity}, ledger {expected}')
            )
            if options['fix']:
                item.recalculate()

        summary = f'{checked} item(s) checked, {drifted} drifted'
        if options['fix'] and drifted:
            summary += ', repaired'
        style = self.style.SUCCESS if not drifted or options['fix'] else self.style.ERROR
        self.stdout.write(style(summary))
