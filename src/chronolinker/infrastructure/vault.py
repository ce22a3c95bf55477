"""Vault — the single dependency injected into every service.

The Vault owns the document store, the update guard, and (once
initialized) the plugin event bus. Store change notifications are routed
to the event bus so plugins observe every create/modify/rename, including
the engine's own writes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from chronolinker.infrastructure.guard import UpdateGuard
from chronolinker.infrastructure.store import FileStore

if TYPE_CHECKING:
    from chronolinker.config.settings import ChronoSettings
    from chronolinker.domain.streams import Stream
    from chronolinker.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


class Vault:
    """Repository encapsulating store, guard, and event access.

    Constructed once at CLI startup from :class:`ChronoSettings`. Services
    receive the Vault via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: ChronoSettings, *, guard: UpdateGuard | None = None) -> None:
        self._settings = settings
        self._store = FileStore(settings.vault_root)
        self._guard = guard or UpdateGuard(settings.engine.settle_delay_ms / 1000)
        self._event_bus: EventBus | None = None

    @property
    def root(self) -> Path:
        """The vault root directory."""
        return self._settings.vault_root

    @property
    def settings(self) -> ChronoSettings:
        return self._settings

    @property
    def streams(self) -> tuple[Stream, ...]:
        """Configured streams, in configuration order."""
        return self._settings.streams

    @property
    def store(self) -> FileStore:
        return self._store

    @property
    def guard(self) -> UpdateGuard:
        return self._guard

    @property
    def event_bus(self) -> EventBus | None:
        """The plugin event bus (None if not initialized)."""
        return self._event_bus

    def init_event_bus(self, *, sync: bool = True) -> None:
        """Initialize the plugin event bus and subscribe it to the store.

        Creates a PluginManager, discovers entry-point plugins, registers
        the built-in AutoLinkPlugin, and wires store notifications into the
        EventBus.
        """
        from chronolinker.plugins.builtins.autolink import AutoLinkPlugin
        from chronolinker.plugins.event_bus import EventBus
        from chronolinker.plugins.manager import PluginManager

        pm = PluginManager()
        pm.discover_and_load()
        pm.register_plugin(AutoLinkPlugin(self), name="autolink-builtin")

        self._event_bus = EventBus(pm, sync=sync)
        self._store.set_notifier(self._event_bus.dispatch)
        logger.debug("Event bus ready (sync=%s)", sync)

    def close(self) -> None:
        """Detach and shut down the event bus."""
        self._store.set_notifier(None)
        if self._event_bus is not None:
            self._event_bus.shutdown()
            self._event_bus = None
