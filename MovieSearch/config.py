"""
Configuration loading for MovieSearch.

Settings live in ``config.json`` next to this module. A user supplied file is
merged over the built-in defaults, so it only needs to name the keys it changes.
"""
import copy
import json
import logging
import os
from typing import Any, Dict, Optional

log = logging.getLogger(__name__)

CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.json")

DEFAULT_CONFIG: Dict[str, Any] = {
    "preprocessing": {
        "lowercase": True,
        "stop_words": {"use": True, "language": "en"},
    },
    "pipeline_order": ["tokenize", "lowercase", "stop_words"],
    "indexing": {"workers": 1},
    "search": {"top_k": 10},
    "metadata": {"id_column": 0, "title_column": 2},
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to a config file (defaults to the packaged config.json)

    Returns:
        Configuration dictionary with defaults filled in
    """
    path = config_path or CONFIG_PATH

    if not os.path.exists(path):
        if config_path:
            log.warning("Config file %s not found, using default settings", path)
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(path, "r", encoding="utf-8") as f:
            user_config = json.load(f)
    except (OSError, ValueError) as e:
        log.warning("Could not load config %s: %s, using default settings", path, e)
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(user_config, dict):
        log.warning("Config %s is not a JSON object, using default settings", path)
        return copy.deepcopy(DEFAULT_CONFIG)

    log.debug("Loaded configuration from %s", path)
    return _merge(DEFAULT_CONFIG, user_config)
