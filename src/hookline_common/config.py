from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}")


def expand_env(value: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """
    Replace ${NAME} and ${NAME:default} in every string of a config tree.

    Field references (%{...}) are left alone. A variable that is unset and
    has no default raises ValueError.
    """
    env = os.environ if environ is None else environ

    if isinstance(value, str):

        def _sub(m: re.Match[str]) -> str:
            name, default = m.group(1), m.group(2)
            if name in env:
                return env[name]
            if default is not None:
                return default
            raise ValueError(f"environment variable {name} is not set")

        return _ENV_REF.sub(_sub, value)
    if isinstance(value, dict):
        return {k: expand_env(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env(v, env) for v in value]
    return value


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("YAML root must be a mapping/dict")
    return expand_env(data)


def filter_options(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """A config is either a pipeline (filter options under "filter") or bare filter options."""
    opts = cfg.get("filter", cfg)
    if not isinstance(opts, dict):
        raise ValueError("filter options must be a mapping")
    return opts
