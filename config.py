"""
Settings for the pump feed listener.

Values come from DEFAULT_CONFIG, overridden by config.json, or by the
environment when USE_ENV_CONFIG=true.
"""

import os
import json
import logging
from typing import Dict, Any

logger = logging.getLogger("config")

DEFAULT_CONFIG = {
    # Feed
    "FEED_URL": "wss://frontend-api.pump.fun/socket.io/?EIO=4&transport=websocket",

    # Sniper (execution service)
    "SNIPER_URL": "http://sniper:6969",
    "FORWARD_TIMEOUT_SECONDS": 5.0,
    "HEALTH_TIMEOUT_SECONDS": 5.0,

    # Modes
    "FILTER_ENABLED": True,
    "LEADERBOARD_MODE": False,

    # Leaderboard
    "LEADERBOARD_SIZE": 20,
    "LEADERBOARD_REFRESH_SECONDS": 1.0,
    "LEADERBOARD_MAX_ENTRIES": 5000,   # 0 = unbounded

    # System
    "LOG_LEVEL": "INFO",
}

CONFIG_FILE = "config.json"


def load_config(config_file: str = CONFIG_FILE) -> Dict[str, Any]:
    """Build the settings dict. Keys absent from the source keep their default."""
    if os.environ.get("USE_ENV_CONFIG", "").lower() == "true":
        logger.info("Reading settings from environment")
        overrides = load_config_from_env()
    else:
        overrides = _read_config_file(config_file)

    config = dict(DEFAULT_CONFIG)
    config.update(overrides)
    return config


def _read_config_file(config_file: str) -> Dict[str, Any]:
    if not os.path.exists(config_file):
        logger.info(f"No {config_file}, using defaults")
        return {}
    try:
        with open(config_file, "r") as f:
            overrides = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Unreadable {config_file}, using defaults: {e}")
        return {}
    logger.info(f"Settings loaded from {config_file}")
    return overrides


def _parse_env_value(raw: str, default: Any) -> Any:
    # bool first: bool is a subclass of int
    if isinstance(default, bool):
        return raw.lower() == "true"
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


def load_config_from_env() -> Dict[str, Any]:
    """Settings found in the environment, typed after their defaults."""
    overrides = {}
    for key, default_value in DEFAULT_CONFIG.items():
        raw = os.environ.get(key)
        if raw is None:
            continue
        try:
            overrides[key] = _parse_env_value(raw, default_value)
        except ValueError as e:
            logger.warning(f"Ignoring {key}={raw!r}: {e}")
    return overrides
