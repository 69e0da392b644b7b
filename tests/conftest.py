"""
Shared fixtures.
"""

import pytest

from crsgraph.core.crs.catalog import GeodeticCatalog, build_catalog
from crsgraph.core.crs.reference_system import ReferenceSystem


@pytest.fixture
def catalog() -> GeodeticCatalog:
    """A freshly wired catalog, so discovery caches never leak between tests."""
    return build_catalog()


@pytest.fixture
def chain():
    """Three local systems wired X -> Y -> Z with no X -> Z edge."""
    x = ReferenceSystem("X")
    y = ReferenceSystem("Y")
    z = ReferenceSystem("Z")

    x.register_conversion(y, lambda c: (c[0] + 1, c[1] * 2))
    y.register_conversion(z, lambda c: (c[0] * 3, c[1] - 5))

    return x, y, z
