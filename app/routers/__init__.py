# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - entities.py: Avatar/category dependents, transfer and delete
# - users.py: Paginated users list
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import entities
from . import users

__all__ = [
    "health",
    "entities",
    "users",
]
