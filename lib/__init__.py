# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - document_store.py: DocumentStore interface the core services depend on
# - supabase_client.py: Typed async Supabase wrapper implementing it
# - utils.py: Shared utilities (batching)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.document_store import DocumentStore
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import chunked

__all__ = [
    # Store
    "DocumentStore",
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "chunked",
]
