"""Configuration loader and validator for the reinitkbd daemon.

Provides ``load_config(path)`` which reads a JSON config (with
comment and trailing-comma tolerant sanitizer) from
``~/.config/xsprite/config.json`` unless another path is given.

Also provides ``validate_config(conf)`` which normalizes and
validates config keys, raising ``ValueError`` on invalid values.
"""

from __future__ import annotations

import json
import logging
import math
import os
import re

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = '~/.config/xsprite/config.json'

# Single source of truth for default configuration
DEFAULT_CONFIG: dict = {
    'init_keyboard': None,
    'debug': False,
    'init_timeout': None,
    'settle_delay': 0.1,
}

_UNEXPANDED_VAR = re.compile(r'\$(\w+|\{[^}]*\})')


class ConfigError(ValueError):
    """Config file is missing, unreadable or invalid."""


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _sanitize_json_text(s: str) -> str:
    """Remove ``#``/``//`` comments and trailing commas from JSON-like text."""
    # Hash-style line comments
    s = re.sub(r"^[ \t]*#.*$", "", s, flags=re.MULTILINE)
    # C++-style line comments (not inside "scheme://" style values)
    s = re.sub(r"(^|[\s,{\[])//.*$", r"\1", s, flags=re.MULTILINE)
    # Trailing commas before } or ]
    s = re.sub(r",[ \t\r\n]+(\}|\])", r"\1", s)
    return s


def expand_command(value: str) -> str:
    """Expand ``~`` and ``$VAR``/``${VAR}`` in a command path.

    Raises ``ValueError`` when a referenced variable is not set.
    """
    expanded = os.path.expandvars(os.path.expanduser(value))
    leftover = _UNEXPANDED_VAR.search(expanded)
    if leftover:
        raise ValueError(f"Invalid 'init_keyboard': undefined variable {leftover.group(0)}")
    return expanded


# ------------------------------------------------------------------
# Validation
# ------------------------------------------------------------------

def validate_config(conf: dict | None) -> dict:
    """Validate and normalize configuration dictionary.

    Returns a normalized dict with all expected keys.
    Raises ``ValueError`` on invalid values.
    """
    if conf is None:
        conf = {}
    if not isinstance(conf, dict):
        raise ValueError("Config must be a JSON object")

    out = dict(DEFAULT_CONFIG)

    # init_keyboard: null or non-empty string, ~ and $VAR expanded
    cmd = conf.get('init_keyboard', DEFAULT_CONFIG['init_keyboard'])
    if cmd is not None:
        if not isinstance(cmd, str) or not cmd.strip():
            raise ValueError("Invalid 'init_keyboard': must be a non-empty string or null")
        cmd = expand_command(cmd)
    out['init_keyboard'] = cmd

    # debug: boolean
    dbg = conf.get('debug', DEFAULT_CONFIG['debug'])
    if not isinstance(dbg, bool):
        raise ValueError("Invalid 'debug' flag: must be boolean")
    out['debug'] = dbg

    # init_timeout: null (wait forever) or positive number
    tmo = conf.get('init_timeout', DEFAULT_CONFIG['init_timeout'])
    if tmo is not None:
        if isinstance(tmo, bool):
            raise ValueError(f"Invalid 'init_timeout': {tmo}")
        try:
            tmo = float(tmo)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid 'init_timeout': {tmo}")
        if not math.isfinite(tmo) or tmo <= 0:
            raise ValueError("Invalid 'init_timeout': must be a finite number > 0 or null")
    out['init_timeout'] = tmo

    # settle_delay: float in [0, 10]
    sd = conf.get('settle_delay', DEFAULT_CONFIG['settle_delay'])
    if isinstance(sd, bool):
        raise ValueError(f"Invalid 'settle_delay': {sd}")
    try:
        sd_val = float(sd)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid 'settle_delay': {sd}")
    if not (0.0 <= sd_val <= 10.0):
        raise ValueError(f"Invalid 'settle_delay': {sd} (must be between 0 and 10)")
    out['settle_delay'] = sd_val

    unknown = set(conf) - set(DEFAULT_CONFIG)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ', '.join(sorted(unknown)))

    return out


# ------------------------------------------------------------------
# Top-level loader
# ------------------------------------------------------------------

def load_config(config_path: str | None = None) -> dict:
    """Load, validate and return the effective configuration.

    Uses *config_path* if given, otherwise ``~/.config/xsprite/config.json``.
    Raises ``ConfigError`` if the file cannot be read, parsed or validated.
    """
    path = os.path.expanduser(config_path or DEFAULT_CONFIG_PATH)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = f.read()
    except OSError as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e

    try:
        cfg = json.loads(raw)
    except json.JSONDecodeError:
        try:
            cfg = json.loads(_sanitize_json_text(raw))
        except json.JSONDecodeError as e:
            raise ConfigError(f"failed to parse config file {path}: {e}") from e

    try:
        return validate_config(cfg)
    except ValueError as e:
        raise ConfigError(f"invalid config file {path}: {e}") from e
