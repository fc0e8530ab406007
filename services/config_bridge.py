# services/config_bridge.py
from __future__ import annotations
from typing import Any
from flask import current_app, has_app_context
from services.config_service import ConfigManager

_CM = ConfigManager()

def _dig(d: dict | None, *keys: str) -> Any | None:
    node = d
    for k in keys:
        if not isinstance(node, dict) or k not in node:
            return None
        node = node[k]
    return node

def get_cfg(*keys: str, section: str = "weekly_reports", default=None):
    """
    File-backed config accessor (falls back to Flask app.config).
    - get_cfg()                    -> whole `section` dict (default 'weekly_reports')
    - get_cfg("a","b")            -> section['a']['b']
    - get_cfg("a.b")              -> dotted path
    """
    # Accept dotted single arg
    if len(keys) == 1 and isinstance(keys[0], str) and "." in keys[0]:
        keys = tuple(keys[0].split("."))

    if keys and keys[0] == section:
        keys = keys[1:]

    # App config wins inside a request (tests and instance overrides land there)
    root = None
    if has_app_context():
        root = current_app.config.get(section)
    if root is None:
        root = _CM.get(section, default=None)

    if root is None:
        err = getattr(_CM, "last_load_error", None)
        if err:
            raise RuntimeError(
                "Config JSON is invalid.\n"
                f"File: {getattr(_CM, 'resolved_path', 'config.json')}\n"
                f"Line {err.lineno}, column {err.colno}: {err.msg}"
            )
        return default

    if not keys:
        return root

    val = _dig(root, *keys)
    return default if val is None else val
