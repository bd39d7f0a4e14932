"""
Storeman Adapters.

Implementations of protocols for external systems.
"""

from storeman.adapters.directory import (
    get_organization_directory,
    reset_organization_directory,
    resolve_organization,
)

__all__ = [
    "get_organization_directory",
    "reset_organization_directory",
    "resolve_organization",
]
