"""Configuration files for logex.

Three-layer config resolution (highest priority wins):
  1. Explicit values — CLI flags or keyword arguments
  2. Project config — .logex.json, found walking up from the working dir
  3. Global config — ~/.logex/config.json (or an explicit --config path)

Config file shape::

    {
      "threshold": "DEBUG",
      "tag_format": {"template": "%s", "args": [{"placeholder": "SIMPLE_CLASS_NAME"}]},
      "message_format": {
        "template": "[%s] %s:%d %s",
        "args": ["app", {"placeholder": "FILE_NAME"},
                 {"placeholder": "LINE_NUMBER"}, {"placeholder": "MESSAGE"}]
      },
      "tags": {"Net": "DEBUG", "Chatty": "SUPPRESS"}
    }

Template args are literals, or ``{"placeholder": NAME}`` objects.
Unreadable files count as empty; content that is readable but wrong
(unknown placeholder, bad level) raises ConfigError right away.
"""

import json
import os
from pathlib import Path

from .errors import ConfigError
from .formatting import FormatTemplate
from .levels import coerce_level
from .manager import LogConfig
from .placeholders import Placeholder
from .tags import parse_tag_level


CONFIG_KEYS = ("threshold", "tag_format", "message_format")
PROJECT_CONFIG_NAME = ".logex.json"


# ---------------------------------------------------------------------------
# Config file locations
# ---------------------------------------------------------------------------
def get_global_config_dir():
    """Return the global config directory (~/.logex/)."""
    return Path.home() / ".logex"


def get_global_config_path():
    """Return path to the global config file."""
    return get_global_config_dir() / "config.json"


def find_project_config(start_dir=None):
    """Walk up from start_dir looking for .logex.json.

    Returns the path if found, None otherwise.
    """
    current = Path(start_dir or os.getcwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------
def load_json(path):
    """Load a JSON object from a file, returning empty dict on error."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (FileNotFoundError, IsADirectoryError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_global_config(config_path=None):
    """Load the global config file (or the one at config_path)."""
    return load_json(config_path or get_global_config_path())


def load_project_config(start_dir=None):
    """Load the nearest .logex.json walking upward from start_dir."""
    path = find_project_config(start_dir)
    if path:
        return load_json(path), path
    return {}, None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------
def parse_template_arg(raw, key):
    """Turn one config template argument into a literal or a Placeholder."""
    if not isinstance(raw, dict):
        return raw
    name = raw.get("placeholder")
    if set(raw) != {"placeholder"} or not isinstance(name, str):
        raise ConfigError(
            f"{key}: template args must be literals or "
            f"{{\"placeholder\": NAME}}, got {raw!r}")
    return Placeholder.from_name(name)


def parse_template(data, key):
    """Build a FormatTemplate from its config representation.

    A bare string is a template with no arguments.
    """
    if isinstance(data, str):
        return FormatTemplate.of(data)
    if not isinstance(data, dict) or not isinstance(data.get("template"), str):
        raise ConfigError(
            f"{key}: expected {{\"template\": str, \"args\": [...]}}")
    args = data.get("args", [])
    if not isinstance(args, list):
        raise ConfigError(f"{key}: args must be a list")
    return FormatTemplate.of(
        data["template"], *(parse_template_arg(a, key) for a in args))


# ---------------------------------------------------------------------------
# Config resolution
# ---------------------------------------------------------------------------
def resolve_config(start_dir=None, config_path=None, overrides=None):
    """Resolve config values using three-layer precedence.

    Scalar keys take the first layer that sets them. ``tags`` maps are
    merged, higher layers winning per tag.

    Returns a dict with 'threshold', 'tag_format', 'message_format'
    (None when unset) and 'tags'.
    """
    overrides = overrides or {}
    project_cfg, _ = load_project_config(start_dir)
    global_cfg = load_global_config(config_path)
    layers = (overrides, project_cfg, global_cfg)

    resolved = {}
    for key in CONFIG_KEYS:
        resolved[key] = None
        for layer in layers:
            if layer.get(key) is not None:
                resolved[key] = layer[key]
                break

    tags = {}
    for layer in reversed(layers):
        layer_tags = layer.get("tags") or {}
        if not isinstance(layer_tags, dict):
            raise ConfigError("tags: expected an object of TAG: LEVEL")
        tags.update(layer_tags)
    resolved["tags"] = tags
    return resolved


def build_log_config(resolved):
    """Turn resolved config values into a LogConfig; unset keys keep defaults."""
    changes = {}
    if resolved.get("threshold") is not None:
        try:
            changes["threshold"] = coerce_level(resolved["threshold"])
        except ValueError as e:
            raise ConfigError(f"threshold: {e}") from None
    for key in ("tag_format", "message_format"):
        if resolved.get(key) is not None:
            changes[key] = parse_template(resolved[key], key)
    return LogConfig(**changes)


def configure_from_files(manager, start_dir=None, config_path=None, **overrides):
    """Resolve config files and apply them to a LogManager.

    Args:
        manager: The LogManager to configure
        start_dir: Where to start looking for .logex.json
        config_path: Global config file to use instead of ~/.logex/config.json
        **overrides: Explicit values (threshold=..., tags={...}, ...)

    Returns:
        The LogConfig now in effect
    """
    resolved = resolve_config(start_dir, config_path, overrides)
    config = build_log_config(resolved)
    tag_levels = {tag: parse_tag_level(level)
                  for tag, level in resolved["tags"].items()}

    manager.configure(config)
    manager.tag_filter.overrides.update(tag_levels)
    return config
