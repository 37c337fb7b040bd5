"""Configuration management for avcaps.

Three-layer config resolution (highest priority wins):
  1. CLI flags — explicit on the command line
  2. Project config — .avcaps.json in the working directory or a parent
  3. Global config — ~/.avcaps/config.json (or --config PATH)

Recognized keys: loglevel, report, cpuflags, cpucount, catalog.

The report can also be requested through the environment::

    AVCAPS_REPORT="file=%p-%t.log:level=48"
"""

import json
import os
from pathlib import Path

CONFIG_KEYS = ["loglevel", "report", "cpuflags", "cpucount", "catalog"]

REPORT_ENV = "AVCAPS_REPORT"


# ---------------------------------------------------------------------------
# Config file locations
# ---------------------------------------------------------------------------
def get_global_config_dir():
    """Return the global config directory (~/.avcaps/)."""
    return Path.home() / ".avcaps"


def get_global_config_path():
    """Return path to the global config file."""
    return get_global_config_dir() / "config.json"


def find_project_config(start_dir=None):
    """Walk up from start_dir looking for .avcaps.json.

    Returns the path if found, None otherwise.
    """
    current = Path(start_dir or os.getcwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / ".avcaps.json"
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
    """Load a JSON file, returning empty dict on error."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_global_config(path=None):
    """Load the global config file, or the file named by --config."""
    return load_json(path or get_global_config_path())


def load_project_config(start_dir=None):
    """Load the nearest .avcaps.json walking upward from start_dir."""
    path = find_project_config(start_dir)
    if path:
        return load_json(path), path
    return {}, None


# ---------------------------------------------------------------------------
# Config resolution
# ---------------------------------------------------------------------------
def resolve_config(args, keys=None, start_dir=None):
    """Resolve config values using three-layer precedence.

    For each key in `keys`, checks (in order):
      1. CLI args (from argparse namespace)
      2. Project .avcaps.json
      3. Global ~/.avcaps/config.json (or args.config)

    Relative catalog paths from a config file are resolved against the
    directory holding that file.

    Returns a dict with resolved values (None when unset everywhere).
    """
    if keys is None:
        keys = CONFIG_KEYS

    project_cfg, project_path = load_project_config(start_dir)
    global_path = Path(getattr(args, "config", None) or get_global_config_path())
    global_cfg = load_global_config(global_path)

    resolved = {}
    for key in keys:
        # Normalize key: argparse uses underscores, JSON may use either
        arg_key = key.replace("-", "_")
        json_key = key.replace("_", "-")

        # Layer 1: CLI
        cli_val = getattr(args, arg_key, None)
        if cli_val is not None:
            resolved[arg_key] = cli_val
            continue

        # Layers 2 and 3: project, then global
        for cfg, path in ((project_cfg, project_path), (global_cfg, global_path)):
            val = cfg.get(arg_key, cfg.get(json_key))
            if val is not None:
                if arg_key == "catalog" and path is not None:
                    val = str((Path(path).parent / val).resolve())
                resolved[arg_key] = val
                break
        else:
            resolved[arg_key] = None

    return resolved


def report_spec_from_env(environ=None):
    """Return the AVCAPS_REPORT value, or None when unset."""
    environ = os.environ if environ is None else environ
    return environ.get(REPORT_ENV)
