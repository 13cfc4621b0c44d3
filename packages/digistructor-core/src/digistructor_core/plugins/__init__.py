from digistructor_core.plugins.loader import (
    ENTRY_POINT_GROUP,
    InvalidPluginError,
    PluginLoader,
    PluginNotFoundError,
)

__all__ = ["ENTRY_POINT_GROUP", "InvalidPluginError", "PluginLoader", "PluginNotFoundError"]
