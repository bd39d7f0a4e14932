"""
Inventory settings — per-organization threshold and catalog lists.

The threshold is read when a StockItem is created and copied into it.
migrate_stock_thresholds() is the only way existing items pick up a change.
"""

import logging

from django.db import transaction

from storeman.conf import storeman_settings
from storeman.models.organization import InventorySettings
from storeman.models.stock_item import StockItem
from storeman.schemas import SettingsIn, parse

logger = logging.getLogger('storeman')


class SettingsService:
    """Inventory settings methods."""

    @classmethod
    def current_threshold(cls, organization) -> int:
        """Threshold a newly created StockItem would get."""
        row = InventorySettings.objects.filter(organization=organization).first()
        if row is None:
            return storeman_settings.DEFAULT_LOW_STOCK_THRESHOLD
        return row.low_stock_threshold

    @classmethod
    def get_settings(cls, organization) -> tuple[dict, dict]:
        """
        Current settings of an organization.

        Returns:
            (data, metadata) where metadata['is_default'] tells whether the
            organization never saved settings.
        """
        row = InventorySettings.objects.filter(organization=organization).first()
        if row is None:
            data = {
                'low_stock_threshold': storeman_settings.DEFAULT_LOW_STOCK_THRESHOLD,
                'custom_categories': [],
                'custom_units': [],
            }
            return data, {'is_default': True}

        data = {
            'low_stock_threshold': row.low_stock_threshold,
            'custom_categories': row.custom_categories or [],
            'custom_units': row.custom_units or [],
        }
        return data, {'is_default': False}

    @classmethod
    def update_settings(cls, organization, data: dict) -> InventorySettings:
        """
        Insert or update the settings row.

        low_stock_threshold is required and must be an integer. No bounds are
        enforced. custom_categories/custom_units are left alone when absent.

        Existing StockItems keep their threshold.
        """
        payload = parse(SettingsIn, data)
        threshold = payload.low_stock_threshold
        defaults = payload.model_dump(exclude_unset=True)

        row, created = InventorySettings.objects.update_or_create(
            organization=organization,
            defaults=defaults,
        )
        logger.info(
            "settings.update",
            extra={
                "organization": organization.slug,
                "low_stock_threshold": threshold,
                "created": created,
            },
        )
        return row

    @classmethod
    def migrate_stock_thresholds(cls, organization, dry_run: bool = False) -> tuple[int, int]:
        """
        Overwrite every StockItem's threshold with the current setting.

        Returns:
            (count, threshold): items touched (or that would be, on dry_run)
            and the threshold applied.
        """
        threshold = cls.current_threshold(organization)
        items = StockItem.objects.for_organization(organization)

        if dry_run:
            return items.count(), threshold

        with transaction.atomic():
            count = items.update(low_stock_threshold=threshold)

        logger.info(
            "settings.migrate_thresholds",
            extra={
                "organization": organization.slug,
                "threshold": threshold,
                "count": count,
            },
        )
        return count, threshold
