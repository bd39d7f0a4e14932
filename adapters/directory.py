"""
Organization directory loader.

Loads the configured OrganizationDirectory from settings and turns a slug
into the local Organization row every Storeman table points at.

Usage:
    from storeman.adapters import resolve_organization

    org = resolve_organization("acme")

Settings:
    STOREMAN = {
        "ORGANIZATION_DIRECTORY": "storeman.adapters.orm.OrmOrganizationDirectory",
    }
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.db import IntegrityError as DatabaseIntegrityError
from django.db import transaction
from django.utils.module_loading import import_string

from storeman.conf import storeman_settings
from storeman.exceptions import ConflictError, NotFoundError
from storeman.models.organization import Organization
from storeman.protocols.directory import OrganizationDirectory

logger = logging.getLogger(__name__)


# Cached directory instance
_lock = threading.Lock()
_directory: OrganizationDirectory | None = None


def get_organization_directory() -> OrganizationDirectory:
    """
    Return the configured organization directory.

    Raises:
        ImproperlyConfigured: If ORGANIZATION_DIRECTORY is empty or import fails
    """
    global _directory

    if _directory is None:
        with _lock:
            if _directory is None:  # double-checked
                directory_path = storeman_settings.ORGANIZATION_DIRECTORY

                if not directory_path:
                    raise ImproperlyConfigured(
                        "STOREMAN['ORGANIZATION_DIRECTORY'] must be configured. "
                        "Example: 'storeman.adapters.orm.OrmOrganizationDirectory'"
                    )

                try:
                    directory_class = import_string(directory_path)
                    _directory = directory_class()
                    logger.debug("Loaded organization directory: %s", directory_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import organization directory '{directory_path}': {e}"
                    ) from e

    return _directory


def reset_organization_directory() -> None:
    """Reset the cached directory. Useful for testing."""
    global _directory
    _directory = None


def resolve_organization(slug: str | None) -> Organization:
    """
    Resolve a slug to the local Organization row.

    A directory backed by an external tenant service may know organizations
    that have no local row yet; one is created from the resolved info, keyed
    by the directory's id. An existing local row is matched by slug.

    Raises:
        NotFoundError('ORGANIZATION_NOT_FOUND'): Unknown or inactive organization
        ConflictError('ORGANIZATION_ID_TAKEN'): The directory id belongs to
            another local organization
    """
    if not slug:
        raise NotFoundError('ORGANIZATION_NOT_FOUND', slug=slug)

    info = get_organization_directory().resolve(slug)
    if not info.is_active:
        raise NotFoundError('ORGANIZATION_NOT_FOUND', slug=slug)

    org = Organization.objects.filter(slug=info.slug).first()
    if org is not None:
        return org

    try:
        with transaction.atomic():
            org = Organization.objects.create(
                pk=info.id, slug=info.slug, name=info.name, is_active=info.is_active,
            )
    except DatabaseIntegrityError as exc:
        # Lost a race for the same slug, or the id is someone else's
        org = Organization.objects.filter(slug=info.slug).first()
        if org is None:
            raise ConflictError('ORGANIZATION_ID_TAKEN', slug=info.slug, id=info.id) from exc
        return org

    logger.info("organization.shadowed", extra={"organization": info.slug})
    return org
