"""
Storeman configuration.

Usage in settings.py:
    STOREMAN = {
        "DEFAULT_LOW_STOCK_THRESHOLD": 10,
        "ORGANIZATION_DIRECTORY": "storeman.adapters.orm.OrmOrganizationDirectory",
        "DEFAULT_LOCATION_CODE": "DEFAULT",
        "DEFAULT_LOCATION_NAME": "Default Warehouse",
        "MOVEMENTS_LIMIT": 100,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class StoremanSettings:
    """Storeman configuration settings."""

    # Threshold used when an organization has no settings row yet
    DEFAULT_LOW_STOCK_THRESHOLD: int = 10

    # Organization resolution backend (dotted path)
    ORGANIZATION_DIRECTORY: str = "storeman.adapters.orm.OrmOrganizationDirectory"

    # Location created when a receipt finds none for the organization
    DEFAULT_LOCATION_CODE: str = "DEFAULT"
    DEFAULT_LOCATION_NAME: str = "Default Warehouse"

    # Default page size for movement history
    MOVEMENTS_LIMIT: int = 100


def get_storeman_settings() -> StoremanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOREMAN", {})
    return StoremanSettings(**{
        k: v for k, v in user_settings.items()
        if k in StoremanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_storeman_settings(), name)


storeman_settings = _LazySettings()
