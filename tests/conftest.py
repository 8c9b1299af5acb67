"""
Shared fixtures for the importer test suite.
"""
import os
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Keep test runs from writing log files
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest

from fakes import AUCTION_HTML, InMemoryCommercePlatform, StubFetcher, default_store


@pytest.fixture
def platform():
    """Commerce platform with the seeded defaults in place."""
    return InMemoryCommercePlatform(store=default_store(), sales_channel_ids=["sc_default"])


@pytest.fixture
def fetcher():
    return StubFetcher(AUCTION_HTML)


@pytest.fixture
def fixed_clock():
    return lambda: 1700000123.0
