# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - store/: Table schemas and row stores (in-memory, Supabase)
# - access/: Row-level access rules and the admin check
# - models/: Pydantic schemas for data validation
# - services/: Requester-scoped operations used by the routers
#
# Code in this package should NOT import from FastAPI routers.
# This keeps the logic testable and reusable.
# =============================================================================
