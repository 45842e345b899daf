#!/usr/bin/env python3
"""
Presupuestos: Application Entry Point
Creates the Flask app, wires the counter store into the generation session
and registers the presupuestos Blueprint.
"""

import os
import logging
from flask import Flask

from logging_config import setup_logging
from presupuestos.core import paths
from presupuestos.core.config import load_config
from presupuestos.core.counter import open_counter_store
from presupuestos.forms.session import GenerationSession

log = logging.getLogger("presupuestos")


def create_app(counter_store=None, output_dir=None, background_path=None,
               config=None, configure_logging=True):
    """Application factory. Arguments override the paths/config defaults."""
    if configure_logging:
        setup_logging()

    app = Flask(__name__)
    app.secret_key = os.environ.get("SECRET_KEY", "presupuestos-dev")

    cfg = config or load_config()
    if counter_store is None:
        counter_store = open_counter_store(paths.COUNTER_PATH,
                                           key=cfg["counter_key"],
                                           default=cfg["counter_default"])

    app.extensions["presupuestos"] = GenerationSession(
        counter_store,
        output_dir=output_dir or paths.OUTPUT_DIR,
        background_path=background_path or paths.BACKGROUND_PATH,
        config=cfg,
    )

    from presupuestos.api.dashboard import bp
    app.register_blueprint(bp)

    # ── Runtime self-test at boot ───────────────────────────────────────────
    try:
        checks = paths.validate_paths()
        for err in checks["errors"]:
            log.error("STARTUP: %s", err)
        for warn in checks["warnings"]:
            log.warning("STARTUP: %s", warn)
    except Exception as e:
        log.warning("Startup checks skipped: %s", e)

    return app


# For gunicorn: gunicorn app:app
app = create_app()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=False)
