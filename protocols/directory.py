"""
Organization Directory Protocol — Interface for tenant resolution.

Storeman defines this protocol; the platform's tenant service (or the
bundled ORM adapter) implements it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class OrganizationInfo:
    """Resolved organization."""

    id: int
    slug: str
    name: str
    is_active: bool = True


@runtime_checkable
class OrganizationDirectory(Protocol):
    """
    Protocol for organization lookup.

    Implementations resolve a slug to an OrganizationInfo and raise
    storeman.exceptions.NotFoundError('ORGANIZATION_NOT_FOUND') when the
    organization does not exist or is inactive.
    """

    def resolve(self, slug: str) -> OrganizationInfo:
        """
        Resolve an organization slug.

        Args:
            slug: Organization identifier

        Returns:
            OrganizationInfo

        Raises:
            NotFoundError: Unknown or inactive organization
        """
        ...
