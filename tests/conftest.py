"""Core test fixtures for charforge tests."""

import pytest

from charforge.rules.loader import load_default_tables
from charforge.rules.schemas import RuleTables

from tests.factories import FixedRandomSource


@pytest.fixture
def fixed_rng():
    """Factory for FixedRandomSource instances."""
    return FixedRandomSource


@pytest.fixture(scope="session")
def srd() -> RuleTables:
    """Bundled SRD 3.5 rule tables."""
    return load_default_tables()
