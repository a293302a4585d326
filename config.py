from datetime import datetime, tzinfo
from pathlib import Path

import yaml

from extractor import resolve_timezone

REQUIRED_KEYS = ["server"]


def load(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open() as f:
        cfg = yaml.safe_load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config file is empty or invalid: {path}")
    for key in REQUIRED_KEYS:
        if key not in cfg:
            raise KeyError(f"Missing required config key: '{key}'")
    server = cfg["server"] or {}
    if not isinstance(server, dict):
        raise ValueError("Config key 'server' must be a mapping")
    port = server.get("port", 8080)
    if isinstance(port, bool) or not isinstance(port, int):
        raise ValueError(f"Invalid server port: {port!r}")
    cfg["server"] = server
    return cfg


def local_timezone(cfg: dict) -> tzinfo:
    """The viewer's zone: the configured ``timezone`` or the host's local zone."""
    name = cfg.get("timezone")
    if not name:
        return datetime.now().astimezone().tzinfo
    tz = resolve_timezone(name)
    if tz is None:
        raise ValueError(f"Unknown timezone in config: '{name}'")
    return tz
