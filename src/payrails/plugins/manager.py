"""PluginManager — pluggy wrapper for payrails lifecycle hooks.

Plugins are found through the ``payrails.plugins`` entry-point group.
Names listed in ``[plugins] disabled`` are blocked before anything loads.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable

import pluggy

from payrails.plugins.hookspecs import PayrailsHookSpec

PROJECT_NAME = "payrails"
ENTRY_POINT_GROUP = "payrails.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Owns the pluggy manager and the hook relay the EventBus calls into."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PayrailsHookSpec)
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def discover_and_load(self, *, disabled: Iterable[str] = ()) -> list[str]:
        """Load entry-point plugins except *disabled*; return every registered name."""
        for name in disabled:
            self._pm.set_blocked(name)
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        logger.debug("Loaded %d entry-point plugin(s) from %s", count, ENTRY_POINT_GROUP)
        for plugin in list(self._pm.get_plugins()):
            if inspect.isclass(plugin):
                self._replace_with_instance(plugin)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        resolved = name or type(plugin).__name__
        self._pm.register(plugin, name=resolved)
        logger.debug("Registered plugin: %s", resolved)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def _replace_with_instance(self, plugin_cls: type) -> None:
        """Swap a plugin registered as a class for an instance of it.

        Hooks called on a class have no ``self``; a class that cannot be
        instantiated is dropped with a warning.
        """
        name = self._pm.get_name(plugin_cls) or plugin_cls.__name__
        self._pm.unregister(plugin_cls)
        try:
            instance = plugin_cls()
        except Exception:
            logger.warning("Dropping plugin %s: instantiation failed", name, exc_info=True)
            return
        self._pm.register(instance, name=name)
        logger.debug("Instantiated entry-point plugin: %s", name)
