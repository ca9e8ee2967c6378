"""Tenant factory for test data generation."""

from polyfactory import Use

from src.lexoffice.models.public import Tenant
from tests.factories.base import BaseFactory, generate_id, utc_now


class TenantFactory(BaseFactory):
    """Factory for generating Tenant directory entries."""

    __model__ = Tenant

    id = Use(generate_id)
    name = Use(lambda: f"Test Tenant {generate_id()[-8:]}")
    is_active = True
    created_at = Use(utc_now)

    @classmethod
    def inactive(cls, **kwargs):
        """Create a deactivated tenant."""
        return cls.build(is_active=False, **kwargs)
