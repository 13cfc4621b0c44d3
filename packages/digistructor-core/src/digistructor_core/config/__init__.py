from .loader import load_config
from .models import (
    BackingConfig,
    BuilderConfig,
    DigestConfig,
    DigistructorConfig,
    PluginsConfig,
    ResolveConfig,
)

__all__ = [
    "BackingConfig",
    "BuilderConfig",
    "DigestConfig",
    "DigistructorConfig",
    "PluginsConfig",
    "ResolveConfig",
    "load_config",
]
