"""
Location model — Where stock exists.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Location(models.Model):
    """
    Warehouse or storage place of an organization.

    Locations are owned by the catalog side of the platform; Storeman only
    reads them, except for the default location a receipt creates when an
    organization has none.

    Examples:
        Location.objects.create(organization=org, code='MAIN', name='Main Warehouse')
    """

    organization = models.ForeignKey(
        'storeman.Organization',
        on_delete=models.CASCADE,
        related_name='locations',
        verbose_name=_('Organization'),
    )
    code = models.CharField(
        max_length=50,
        verbose_name=_('Code'),
        help_text=_('Unique per organization (ex: MAIN, DEFAULT)'),
    )
    name = models.CharField(max_length=100, verbose_name=_('Name'))
    address = models.TextField(blank=True, default='', verbose_name=_('Address'))
    active = models.BooleanField(default=True, verbose_name=_('Active'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Location')
        verbose_name_plural = _('Locations')
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'code'],
                name='unique_location_code_per_org',
            )
        ]

    def __str__(self) -> str:
        return self.name

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'code': self.code,
            'name': self.name,
            'address': self.address,
            'active': self.active,
        }
