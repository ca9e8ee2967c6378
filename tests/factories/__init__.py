"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import TenantFactory
"""

from tests.factories.base import BaseFactory, generate_id, utc_now
from tests.factories.tenant import TenantFactory

__all__ = [
    "BaseFactory",
    "TenantFactory",
    "generate_id",
    "utc_now",
]
