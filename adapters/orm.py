"""
ORM Organization Directory — resolves tenants from the Organization table.

Default adapter, used when STOREMAN['ORGANIZATION_DIRECTORY'] is not changed.
"""

from __future__ import annotations

from storeman.exceptions import NotFoundError
from storeman.models.organization import Organization
from storeman.protocols.directory import OrganizationInfo


class OrmOrganizationDirectory:
    """
    Organization lookup backed by storeman.Organization.

    Inactive organizations are reported as not found.
    """

    def resolve(self, slug: str) -> OrganizationInfo:
        org = Organization.objects.filter(slug=slug, is_active=True).first()
        if org is None:
            raise NotFoundError('ORGANIZATION_NOT_FOUND', slug=slug)
        return OrganizationInfo(
            id=org.pk,
            slug=org.slug,
            name=org.name,
            is_active=org.is_active,
        )
