"""
pytest configuration for the pppoat test suite
"""

import asyncio
import sys
from pathlib import Path

import pytest

# Add src directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


# Custom markers
def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as using real loopback sockets"
    )


def pytest_collection_modifyitems(config, items):
    """Modify collected test items"""
    for item in items:
        # Add asyncio marker to async tests
        if asyncio.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)

        if item.get_closest_marker("integration") is None:
            item.add_marker(pytest.mark.unit)
