"""
Catalog models — Product and Supplier.

Their lifecycle is owned elsewhere in the platform; Storeman references them
by id and only offers thin create/list calls.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Product(models.Model):
    """Stockable product of an organization."""

    organization = models.ForeignKey(
        'storeman.Organization',
        on_delete=models.CASCADE,
        related_name='products',
        verbose_name=_('Organization'),
    )
    sku = models.CharField(max_length=64, verbose_name=_('SKU'))
    name = models.CharField(max_length=200, verbose_name=_('Name'))
    category = models.CharField(max_length=100, blank=True, default='', db_index=True)
    unit = models.CharField(max_length=20, blank=True, default='pcs')
    description = models.TextField(blank=True, default='')
    active = models.BooleanField(default=True, verbose_name=_('Active'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['name']
        indexes = [
            models.Index(fields=['organization', 'sku'], name='storeman_product_org_sku_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.sku} {self.name}"

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'sku': self.sku,
            'name': self.name,
            'category': self.category,
            'unit': self.unit,
            'description': self.description,
            'active': self.active,
        }


class Supplier(models.Model):
    """Supplier purchase orders are placed with."""

    organization = models.ForeignKey(
        'storeman.Organization',
        on_delete=models.CASCADE,
        related_name='suppliers',
        verbose_name=_('Organization'),
    )
    name = models.CharField(max_length=200, verbose_name=_('Name'))
    contact_person = models.CharField(max_length=200, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=50, blank=True, default='')
    address = models.TextField(blank=True, default='')
    notes = models.TextField(blank=True, default='')
    active = models.BooleanField(default=True, verbose_name=_('Active'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Supplier')
        verbose_name_plural = _('Suppliers')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'name': self.name,
            'contact_person': self.contact_person or self.name,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
            'notes': self.notes,
        }
