# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends(). Tests replace
# get_document_store through app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from lib.document_store import DocumentStore
from lib.supabase_client import SupabaseClient
from core.services.entity_service import EntityService
from core.services.reference_integrity import ReferenceIntegrityService
from core.services.user_service import UserService


def get_document_store() -> DocumentStore:
    """
    Get the document store.

    Returns the singleton Supabase client wrapper.
    """
    return SupabaseClient


# Type alias for dependency injection
StoreDep = Annotated[DocumentStore, Depends(get_document_store)]


def get_integrity_service(store: StoreDep) -> ReferenceIntegrityService:
    return ReferenceIntegrityService(store)


def get_entity_service(store: StoreDep) -> EntityService:
    return EntityService(store)


def get_user_service(store: StoreDep) -> UserService:
    return UserService(store)


IntegrityServiceDep = Annotated[ReferenceIntegrityService, Depends(get_integrity_service)]
EntityServiceDep = Annotated[EntityService, Depends(get_entity_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
