"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import DigistructorConfig

# Only these variables may be interpolated into config values
_ALLOWED_ENV_VARS = frozenset({"HOME", "XDG_DATA_HOME", "DIGISTRUCTOR_HOME", "DIGISTRUCTOR_DB"})


def load_config(cli_path: str | None = None) -> DigistructorConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./digistructor.yaml"),
        Path.home() / ".digistructor" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                raw = _expand_env_vars(raw)
                return DigistructorConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except (TypeError, ValidationError) as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return DigistructorConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand allowlisted ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", _substitute, obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


def _substitute(match: re.Match) -> str:
    name = match.group(1)
    if name not in _ALLOWED_ENV_VARS:
        return match.group(0)
    return os.environ.get(name, "")


# Default YAML template for `digistructor config init`
DEFAULT_CONFIG_TEMPLATE = """\
# digistructor.yaml

# Digest function used for every leaf and edge
digest:
  algorithm: "sha256"          # sha256 | sha512 | sha3_256 | blake2b

# Reconstruction guards
resolve:
  max_depth: 100000
  # max_bytes: 1073741824
  memoize: true                # reuse subtrees verified earlier in the same call

# Persistent backing store
backing:
  path: ".digistructor/store.db"
  timeout: 5.0                 # seconds to wait on a locked database

# Chunking for `digistructor put`
builder:
  chunk_size: 65536

# plugins:
#   backing: "sqlite"          # entry point name in digistructor.plugins.backing

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
