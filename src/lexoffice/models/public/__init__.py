"""Public schema models."""

from src.lexoffice.models.public.tenant import Tenant

__all__ = ["Tenant"]
