# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Indus Skylab API:
# - test_policies.py / test_gateway.py: Row-level access rules
# - test_memory_store.py: In-memory row store and foreign keys
# - test_*_service.py: Service layer behaviour
# - test_models.py: Unit tests for Pydantic model validation
# - test_api.py: Integration tests for API endpoints
#
# Run tests with: pytest
# =============================================================================
