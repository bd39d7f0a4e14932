"""
Organization and InventorySettings models — the tenant and its configuration.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Organization(models.Model):
    """
    Tenant. Every other Storeman row belongs to exactly one organization.

    Resolved by slug through the OrganizationDirectory (see protocols).
    """

    slug = models.SlugField(
        unique=True,
        max_length=100,
        verbose_name=_('Slug'),
    )
    name = models.CharField(max_length=200, verbose_name=_('Name'))
    is_active = models.BooleanField(default=True, verbose_name=_('Active'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Organization')
        verbose_name_plural = _('Organizations')
        ordering = ['slug']

    def __str__(self) -> str:
        return self.name


class InventorySettings(models.Model):
    """
    Per-organization inventory settings (at most one row per organization).

    low_stock_threshold is copied into each StockItem when the item is
    created. Changing it here does NOT touch existing items; run
    migrate_stock_thresholds for that.
    """

    organization = models.OneToOneField(
        'storeman.Organization',
        on_delete=models.CASCADE,
        related_name='inventory_settings',
        verbose_name=_('Organization'),
    )
    low_stock_threshold = models.IntegerField(
        default=10,
        verbose_name=_('Low stock threshold'),
    )
    custom_categories = models.JSONField(default=list, blank=True)
    custom_units = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Inventory settings')
        verbose_name_plural = _('Inventory settings')

    def __str__(self) -> str:
        return f"{self.organization}: threshold {self.low_stock_threshold}"
