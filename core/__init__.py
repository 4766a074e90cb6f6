# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the collection logic behind the API:
# - models/: Pydantic schemas for data validation
# - services/: Album, profile, storage and metadata operations
#
# Routers stay thin and call into services/ for everything else.
# =============================================================================
