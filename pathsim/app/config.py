# pathsim/app/config.py
#!/usr/bin/env python3
"""
Viewer settings.

- ENV: PATHSIM_MAP, PATHSIM_ALGO, PATHSIM_SIZE, PATHSIM_LOG_LEVEL
- CLI: --map=NAME|PATH --algo=astar|dijkstra|bfs|ucs --size=WxH --log-level=LEVEL
CLI flags win over the environment.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from pathsim.core.errors import ConfigError
from pathsim.core.maps import MAP_DIR
from pathsim.core.types import Algorithm

DEFAULT_SIZE = (15, 15)

_ENV_KEYS = {
    "map": "PATHSIM_MAP",
    "algo": "PATHSIM_ALGO",
    "size": "PATHSIM_SIZE",
    "log-level": "PATHSIM_LOG_LEVEL",
}


@dataclass
class ViewerConfig:
    algorithm: Algorithm = Algorithm.ASTAR
    map_path: Optional[Path] = None
    size: Tuple[int, int] = DEFAULT_SIZE
    log_level: int = logging.WARNING


def bundled_maps() -> Dict[str, Path]:
    if not MAP_DIR.is_dir():
        return {}
    return {p.stem: p for p in sorted(MAP_DIR.glob("*.json"))}


def parse_size(text: str) -> Tuple[int, int]:
    try:
        w, h = text.lower().split("x")
        size = (int(w), int(h))
    except ValueError:
        raise ConfigError(f"size must look like 15x15, got {text!r}", key="size", value=text)
    if size[0] <= 0 or size[1] <= 0:
        raise ConfigError(f"size must be positive, got {text!r}", key="size", value=text)
    return size


def _resolve_map(text: str) -> Path:
    maps = bundled_maps()
    if text in maps:
        return maps[text]
    path = Path(text)
    if not path.exists():
        raise ConfigError(f"no such map: {text!r}", key="map", value=text)
    return path


def resolve_config(argv: Optional[List[str]] = None,
                   environ: Optional[Mapping[str, str]] = None) -> ViewerConfig:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ

    raw: Dict[str, str] = {}
    for key, env in _ENV_KEYS.items():
        if environ.get(env):
            raw[key] = environ[env]
    for arg in argv:
        if not arg.startswith("--") or "=" not in arg:
            continue
        key, value = arg[2:].split("=", 1)
        if key not in _ENV_KEYS:
            raise ConfigError(f"unknown option --{key}", key=key, value=value)
        raw[key] = value

    cfg = ViewerConfig()
    if "algo" in raw:
        try:
            cfg.algorithm = Algorithm.parse(raw["algo"])
        except ValueError as ex:
            raise ConfigError(str(ex), key="algo", value=raw["algo"]) from ex
    if "size" in raw:
        cfg.size = parse_size(raw["size"])
    if "map" in raw:
        cfg.map_path = _resolve_map(raw["map"])
    if "log-level" in raw:
        level = logging.getLevelName(raw["log-level"].upper())
        if not isinstance(level, int):
            raise ConfigError(f"unknown log level {raw['log-level']!r}",
                              key="log-level", value=raw["log-level"])
        cfg.log_level = level
    return cfg
