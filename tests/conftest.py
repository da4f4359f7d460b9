# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides an in-memory document store seeded with console data
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from tests.fakes import InMemoryDocumentStore, make_challenges, make_users


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def sample_avatars():
    """Avatars A1-A3."""
    return [
        {"id": "A1", "name": "Skeptical Steve", "age": 45, "book_rate": "Hard"},
        {"id": "A2", "name": "Friendly Fiona", "age": 32, "book_rate": "Easy"},
        {"id": "A3", "name": "Busy Bob", "age": 51, "book_rate": "Medium"},
    ]


@pytest.fixture
def sample_categories():
    """Categories C1, C2 and C9."""
    return [
        {"id": "C1", "name": "Cold Outreach", "description": "First contact"},
        {"id": "C2", "name": "Closing", "description": "Getting to yes"},
        {"id": "C9", "name": "Unused", "description": "Nothing points here"},
    ]


@pytest.fixture
def store(sample_avatars, sample_categories):
    """
    Store with 3 challenges on avatar A1 / category C1 and one on A3 / C2.
    """
    challenges = make_challenges(3) + [
        {"id": "other", "title": "Other", "avatar": "A3", "category_id": "C2"},
    ]
    return InMemoryDocumentStore({
        "avatars": sample_avatars,
        "categories": sample_categories,
        "challenges": challenges,
        "users": make_users(30),
    })
