# =============================================================================
# core/services/row_actions.py - Row Action Dispatch
# =============================================================================
# List rows stay plain data. Actions a row offers ("check", "delete", ...)
# are registered once per list and dispatched by action name + record id.
# =============================================================================

import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

RowAction = Callable[[str], Awaitable[Any]]


class UnknownRowActionError(KeyError):
    """Raised when dispatching an action that was never registered."""
    pass


class RowActionDispatcher:
    """
    Registry of async row actions keyed by name.

    Example:
        actions = RowActionDispatcher()
        actions.register("delete", service_delete)
        await actions.dispatch("delete", "A1")
    """

    def __init__(self):
        self._actions: dict[str, RowAction] = {}

    def register(self, name: str, handler: RowAction) -> None:
        if name in self._actions:
            raise ValueError(f"Row action already registered: {name}")
        self._actions[name] = handler

    @property
    def available_actions(self) -> list[str]:
        return sorted(self._actions)

    async def dispatch(self, name: str, record_id: str) -> Any:
        """
        Run action `name` for `record_id`.

        Raises:
            UnknownRowActionError: If no handler is registered under `name`
        """
        handler = self._actions.get(name)
        if handler is None:
            raise UnknownRowActionError(name)
        logger.debug(f"Dispatching row action {name} for {record_id}")
        return await handler(record_id)
