# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Academy Console API:
# - fakes.py: In-memory document store with failure injection
# - test_models.py: Unit tests for Pydantic model validation
# - test_reference_*.py, test_dependent_finder.py, test_migration_planner.py:
#   Safe deletion of referenced entities
# - test_paginated_cursor.py: Keyset pagination of the users list
# - test_api.py: Integration tests for API endpoints
#
# Run tests with: pytest
# =============================================================================
