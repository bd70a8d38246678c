"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import os
import sys

# Environment must be in place before config is imported anywhere
os.environ.setdefault("RUNTIME_ENVIRONMENT", "TEST")
os.environ.setdefault("AIRTABLE_API_KEY", "patTESTTESTTEST.0000")
os.environ.setdefault("AIRTABLE_BASE_ID", "appTEST")
os.environ.setdefault("AIRTABLE_RETRY_BACKOFF_SECONDS", "0")
os.environ.setdefault("REVIEW_SETTLE_SECONDS", "0")
os.environ.setdefault("CART_SAVE_DEBOUNCE_SECONDS", "0.01")
os.environ.setdefault("LANGUAGE", "ru")

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

import pytest

from fakes import FakeAirtableClient, FakeClock
from utils.local_store import LocalStore


@pytest.fixture
def client():
    """In-memory records API."""
    return FakeAirtableClient()


@pytest.fixture
def store(tmp_path):
    """Local state file in a temporary directory."""
    return LocalStore(tmp_path / "local_state.json")


@pytest.fixture
def clock():
    return FakeClock()
