"""
Call middleware.

Hooks run in list order inside the calling task. A hook may be a
``Middleware`` subclass or any object exposing some of ``before``,
``after`` and ``on_error`` (sync or async). A hook that returns ``None``
leaves the value unchanged; a hook that raises is logged and skipped.
"""

from __future__ import annotations

import inspect
from typing import Any, Dict, Iterable, List, Optional

from ..models.generation import ErrorContext
from ..observability.logging import CostLensLogger


class Middleware:
    """Base class for call hooks; override the ones you need."""

    async def before(self, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return params

    async def after(self, result: Any) -> Any:
        return result

    async def on_error(self, error: BaseException, context: ErrorContext) -> None:
        return None


async def _invoke(hook: Any, *args: Any) -> Any:
    value = hook(*args)
    if inspect.isawaitable(value):
        value = await value
    return value


class MiddlewareChain:
    """Ordered list of hooks shared by every call of one client."""

    def __init__(self, middleware: Optional[Iterable[Any]] = None, log: Optional[CostLensLogger] = None):
        self.middleware: List[Any] = list(middleware or [])
        self.log = log or CostLensLogger("middleware")

    def __len__(self) -> int:
        return len(self.middleware)

    async def _run(self, stage: str, value: Any) -> Any:
        for mw in self.middleware:
            hook = getattr(mw, stage, None)
            if hook is None:
                continue
            try:
                updated = await _invoke(hook, value)
            except Exception as e:  # noqa: BLE001
                self.log.warning("Middleware error (non-fatal)", stage=stage,
                                 middleware=type(mw).__name__, error=e)
                continue
            if updated is not None:
                value = updated
        return value

    async def run_before(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return await self._run("before", params)

    async def run_after(self, result: Any) -> Any:
        return await self._run("after", result)

    async def run_on_error(self, error: BaseException, context: ErrorContext) -> None:
        for mw in self.middleware:
            hook = getattr(mw, "on_error", None)
            if hook is None:
                continue
            try:
                await _invoke(hook, error, context)
            except Exception as e:  # noqa: BLE001
                self.log.warning("Middleware error (non-fatal)", stage="on_error",
                                 middleware=type(mw).__name__, error=e)
