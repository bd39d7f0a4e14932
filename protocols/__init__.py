"""
Storeman Protocols.

Defines interfaces for external system integration.
"""

from storeman.protocols.directory import (
    OrganizationDirectory,
    OrganizationInfo,
)

__all__ = [
    "OrganizationDirectory",
    "OrganizationInfo",
]
