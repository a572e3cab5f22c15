"""Access administration module."""

from accessgate.api.admin.service import AccessAdminService

__all__ = ["AccessAdminService"]
