# =============================================================================
# core/models/pagination.py - Cursor Pagination Schemas
# =============================================================================
# - CursorKey: (timestamp, document id) position of the last row seen
# - CursorState: position, page size and end-of-stream flag
# - Page: one fetched page plus the cursor state after the fetch
#
# Rows are ordered by creation timestamp descending with the document id as
# a tie-breaker, so equal timestamps can never duplicate or skip rows.
# =============================================================================

import base64
import json
from typing import Any

from pydantic import BaseModel, Field, ValidationError


class CursorKey(BaseModel):
    """Keyset position: the last row's sort value and its document id."""

    timestamp: Any
    document_id: str

    model_config = {"frozen": True}

    @classmethod
    def from_document(cls, document: dict[str, Any], order_field: str) -> "CursorKey":
        return cls(timestamp=document.get(order_field), document_id=str(document["id"]))


class CursorState(BaseModel):
    """
    Forward-only cursor over an ordered collection.

    Created fresh per list view, mutated after each page fetch and discarded
    on refresh.
    """

    last_seen_key: CursorKey | None = None
    page_size: int = Field(default=25, ge=1, le=100)
    exhausted: bool = False

    def to_token(self) -> str:
        """
        Encode the cursor as an opaque URL-safe token.

        Datetimes are serialized to ISO-8601 so the token survives a
        round trip through query strings.
        """
        payload = self.model_dump(mode="json")
        raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    @classmethod
    def from_token(cls, token: str) -> "CursorState":
        """
        Decode a token produced by `to_token`.

        Raises:
            ValueError: If the token is malformed
        """
        padded = token + "=" * (-len(token) % 4)
        try:
            raw = base64.urlsafe_b64decode(padded.encode("ascii"))
            return cls.model_validate(json.loads(raw))
        except (ValueError, ValidationError, UnicodeError) as e:
            raise ValueError(f"Malformed cursor token: {e}") from e


class Page(BaseModel):
    """Items returned by one fetch and the cursor state afterwards."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    state: CursorState

    @property
    def exhausted(self) -> bool:
        return self.state.exhausted

