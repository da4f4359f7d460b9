# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from typing import Iterable, Iterator, TypeVar

T = TypeVar("T")


# =============================================================================
# Batching Utilities
# =============================================================================

def chunked(items: Iterable[T], size: int) -> Iterator[list[T]]:
    """
    Split items into consecutive lists of at most `size` elements.

    Order is preserved and only the last chunk may be shorter.

    Args:
        items: Any iterable
        size: Maximum chunk length (must be >= 1)

    Raises:
        ValueError: If size < 1

    Example:
        list(chunked([1, 2, 3, 4, 5], 2))  # [[1, 2], [3, 4], [5]]
    """
    if size < 1:
        raise ValueError(f"Chunk size must be >= 1, got {size}")

    chunk: list[T] = []
    for item in items:
        chunk.append(item)
        if len(chunk) == size:
            yield chunk
            chunk = []
    if chunk:
        yield chunk
