"""
Pytest configuration file.

Puts the project root on the Python path so the tests can import lazy,
args, containers, models and utils without installing the project.
"""

import sys
from pathlib import Path

# Add the parent directory to the Python path
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

import pytest


@pytest.fixture
def call_log():
    """Predicate that records every value it is asked about."""
    calls = []

    def is_even(x):
        calls.append(x)
        return x % 2 == 0

    is_even.calls = calls
    return is_even
