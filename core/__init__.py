# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the console's business logic:
# - models/: Pydantic schemas for documents, references and pagination
# - services/: Reference integrity engine, users cursor, entity reads
#
# Code in this package talks to storage only through lib.document_store,
# so every service runs against an in-memory store in tests.
# =============================================================================
