"""Backing store discovery: entry points first, the SQLite store otherwise."""

from __future__ import annotations

import importlib
import importlib.metadata
import logging
from typing import TYPE_CHECKING

from digistructor_core.errors import DigistructorError
from digistructor_core.interfaces.backing import BACKING_PLUGIN_MEMBERS, BackingPlugin

if TYPE_CHECKING:
    from digistructor_core.config.models import DigistructorConfig

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "digistructor.plugins.backing"

# Used when neither the caller nor the config names a backing store
DEFAULT_BACKING = ("digistructor_lite.backing.sqlite_backing", "SQLiteBackingStore")


class PluginNotFoundError(DigistructorError):
    """No backing store is registered under the requested name."""

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        if name is None:
            msg = "no backing store available; install digistructor-lite or register a plugin"
        else:
            msg = f"no backing store registered as '{name}' in {ENTRY_POINT_GROUP}"
        super().__init__(msg)


class InvalidPluginError(DigistructorError, TypeError):
    """A loaded object does not provide what a backing store plugin needs."""

    def __init__(self, name: str, plugin: object, missing: list[str]) -> None:
        self.name = name
        self.plugin = plugin
        self.missing = missing
        label = getattr(plugin, "__qualname__", type(plugin).__name__)
        super().__init__(
            f"backing store '{name}' ({label}) is missing: {', '.join(missing)}"
        )


class PluginLoader:
    """Finds the backing store class to use and checks it before handing it out.

    Name resolution: explicit argument, then ``plugins.backing`` from config,
    then the bundled SQLite store. A name that was asked for but is not
    registered is an error rather than a silent fallback.
    """

    def __init__(self, config: DigistructorConfig):
        self._config = config

    def discover(self) -> list[str]:
        """Names registered under the backing store entry point group."""
        return [ep.name for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP)]

    def load_backing(self, name: str | None = None) -> type[BackingPlugin]:
        """Return a checked backing store class; build it with ``from_config``."""
        name = name if name is not None else self._config.plugins.backing
        if name is None:
            plugin = self._import_default()
            name = "default"
        else:
            plugin = self._from_entry_point(name)

        missing = [m for m in BACKING_PLUGIN_MEMBERS if not callable(getattr(plugin, m, None))]
        if missing:
            raise InvalidPluginError(name, plugin, missing)
        logger.debug("Using backing store %s (%s)", name, getattr(plugin, "__qualname__", plugin))
        return plugin

    def open_backing(self, name: str | None = None) -> BackingPlugin:
        """Load the backing store class and build it from the ``backing`` config."""
        return self.load_backing(name).from_config(self._config.backing)

    def _from_entry_point(self, name: str) -> object:
        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            if ep.name == name:
                return ep.load()
        raise PluginNotFoundError(name)

    def _import_default(self) -> object:
        module_path, class_name = DEFAULT_BACKING
        try:
            module = importlib.import_module(module_path)
            return getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise PluginNotFoundError() from e
