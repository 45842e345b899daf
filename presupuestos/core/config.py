"""
Business configuration for the presupuesto template.

Defaults live here; an optional presupuestos_config.json in DATA_DIR
overrides any of them (e.g. to change who signs the document).
"""

import json
import logging

from presupuestos.core.paths import CONFIG_PATH

log = logging.getLogger("presupuestos.config")

DEFAULTS = {
    "firma": "Wilson Martínez",
    "seña_pct": 60,
    "intro": ("Es un placer para nosotros presentarle el presupuesto detallado "
              "para el servicio que ha solicitado."),
    "counter_key": "presupuestoN",
    "counter_default": 1,
}


def load_config(path=None) -> dict:
    """Return DEFAULTS merged with the JSON config file, if one exists."""
    cfg = dict(DEFAULTS)
    path = path or CONFIG_PATH
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        return cfg
    except (OSError, json.JSONDecodeError) as e:
        log.warning("Config %s unreadable, using defaults: %s", path, e)
        return cfg
    if not isinstance(raw, dict):
        log.warning("Config %s is not a JSON object, using defaults", path)
        return cfg
    unknown = set(raw) - set(DEFAULTS)
    if unknown:
        log.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
    cfg.update({k: v for k, v in raw.items() if k in DEFAULTS})
    return cfg
