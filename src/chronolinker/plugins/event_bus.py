"""Store notification dispatch via pluggy, inline or on a thread pool.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from chronolinker.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class EventBus:
    """Routes ``notify(hook_name, payload)`` calls to plugin hooks.

    Parameters:
        plugin_manager: Loaded PluginManager for hook dispatch.
        sync: Dispatch inline on the caller's thread (``--sync``, tests).
        max_workers: ThreadPoolExecutor worker count when async.
    """

    def __init__(
        self,
        plugin_manager: PluginManager,
        *,
        sync: bool = False,
        max_workers: int = 2,
    ) -> None:
        self._pm = plugin_manager
        self._sync = sync
        self._executor: ThreadPoolExecutor | None = (
            None if sync else ThreadPoolExecutor(max_workers=max_workers)
        )
        self._futures: list[Future[bool]] = []
        self._failures = 0
        self._lock = threading.Lock()

    @property
    def failures(self) -> int:
        """Number of hook calls that raised since construction."""
        return self._failures

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> None:
        """Invoke *hook_name* with *payload* on every registered plugin."""
        if self._sync or self._executor is None:
            self._execute_hook(hook_name, payload)
            return
        future = self._executor.submit(self._execute_hook, hook_name, payload)
        with self._lock:
            self._futures.append(future)

    def wait(self) -> None:
        """Block until every queued dispatch, including ones they queue, is done."""
        while True:
            with self._lock:
                pending, self._futures = self._futures, []
            if not pending:
                return
            for future in pending:
                future.result(timeout=30)

    def shutdown(self) -> None:
        """Drain queued dispatches and stop the executor."""
        self.wait()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _execute_hook(self, hook_name: str, payload: dict[str, Any]) -> bool:
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            logger.debug("No hook named %s", hook_name)
            return False
        try:
            hook_fn(**payload)
        except Exception:
            with self._lock:
                self._failures += 1
            logger.warning("Hook %s failed for %s", hook_name, payload, exc_info=True)
            return False
        return True
