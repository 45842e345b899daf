"""
presupuestos/core/paths.py: Centralized Path Configuration

Single source of truth for all directory paths across the application.
Every module imports from here instead of computing its own DATA_DIR.

Priority for the data directory: PRESUPUESTOS_DATA_DIR env → project data/.
"""

import os
import logging

log = logging.getLogger("presupuestos.paths")

# ── Project Root ──────────────────────────────────────────────────────────────
_THIS_FILE = os.path.abspath(__file__)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(_THIS_FILE)))

_GIT_DATA_DIR = os.path.join(PROJECT_ROOT, "data")


def _resolve_dir(env_name: str, default: str) -> str:
    """Env override when it names an existing directory, else the default."""
    env_dir = os.environ.get(env_name, "")
    if env_dir and os.path.isdir(env_dir):
        return env_dir
    if env_dir:
        log.warning("%s=%s is not a directory, using %s", env_name, env_dir, default)
    return default


DATA_DIR = _resolve_dir("PRESUPUESTOS_DATA_DIR", _GIT_DATA_DIR)
ASSETS_DIR = _resolve_dir("PRESUPUESTOS_ASSETS_DIR", os.path.join(PROJECT_ROOT, "assets"))

# ── Core Directories ─────────────────────────────────────────────────────────
OUTPUT_DIR = os.path.join(DATA_DIR, "output")
LOG_DIR = os.path.join(DATA_DIR, "logs")

# ── Key File Paths ───────────────────────────────────────────────────────────
COUNTER_PATH = os.path.join(DATA_DIR, "counter.json")
CONFIG_PATH = os.path.join(DATA_DIR, "presupuestos_config.json")
BACKGROUND_PATH = os.environ.get("PRESUPUESTOS_BACKGROUND") or os.path.join(ASSETS_DIR, "fondobase.png")

# ── Ensure core dirs exist ───────────────────────────────────────────────────
for _d in [DATA_DIR, OUTPUT_DIR]:
    try:
        os.makedirs(_d, exist_ok=True)
    except OSError as e:
        log.warning("Could not create %s: %s", _d, e)


def validate_paths() -> dict:
    """Runtime validation, called once at app startup.

    Returns:
        {"ok": bool, "errors": [str], "warnings": [str], "resolved": {name: path}}
    """
    result = {"ok": True, "errors": [], "warnings": [], "resolved": {}}

    checks = {
        "PROJECT_ROOT": (PROJECT_ROOT, True),
        "DATA_DIR": (DATA_DIR, True),
        "OUTPUT_DIR": (OUTPUT_DIR, True),
        "BACKGROUND_PATH": (BACKGROUND_PATH, False),
        "CONFIG_PATH": (CONFIG_PATH, False),
    }

    for name, (path, required) in checks.items():
        result["resolved"][name] = path
        if not os.path.exists(path):
            if required:
                result["errors"].append(f"{name} not found: {path}")
                result["ok"] = False
            else:
                result["warnings"].append(f"{name} not found: {path}")

    # Verify DATA_DIR is writable
    test_file = os.path.join(DATA_DIR, ".write_test")
    try:
        with open(test_file, "w") as f:
            f.write("ok")
        os.remove(test_file)
    except OSError as e:
        result["errors"].append(f"DATA_DIR not writable: {e}")
        result["ok"] = False

    return result
