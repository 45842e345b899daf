"""
Presupuestos web routes: form page, preview, download, health.

The GenerationSession lives in app.extensions["presupuestos"] and is
created by the app factory (app.py).
"""

import io
import os
import time
import logging

from flask import (Blueprint, current_app, request, render_template_string,
                   send_file, jsonify, url_for, abort)

from presupuestos.api.templates import BASE_CSS, PAGE_FORM
from presupuestos.core.errors import InvalidDate
from presupuestos.forms.quote_form import QuoteForm, invalid_date_parts

log = logging.getLogger("presupuestos.api")

bp = Blueprint("presupuestos", __name__)

# HTTP status per error kind
_STATUS = {
    "missing_fields": 400,
    "invalid_date": 400,
    "generation_in_progress": 409,
    "asset_load_failure": 503,
}


def _session():
    return current_app.extensions["presupuestos"]


def render(form=None, status=200, error=None, **kw):
    """Form page. ``error`` overrides the session's error slot for this response only."""
    gs = _session()
    form = form or QuoteForm()
    kw.setdefault("warning", gs.warning)
    html = render_template_string(PAGE_FORM, css=BASE_CSS, numero=gs.numero,
                                  form=form.to_dict(),
                                  error=gs.error_message if error is None else error,
                                  **kw)
    return html, status


# ═══════════════════════════════════════════════════════════════════════
# Request-level structured logging
# ═══════════════════════════════════════════════════════════════════════

@bp.before_app_request
def _log_request_start():
    request._start_time = time.time()


@bp.after_app_request
def _log_request_end(response):
    if hasattr(request, "_start_time"):
        duration_ms = round((time.time() - request._start_time) * 1000, 1)
        if request.path not in ("/api/health",):
            log.info("%s %s → %d (%.0fms)",
                     request.method, request.path, response.status_code, duration_ms,
                     extra={"route": request.path, "method": request.method,
                            "status": response.status_code, "duration_ms": duration_ms})
    return response


# ═══════════════════════════════════════════════════════════════════════
# Pages
# ═══════════════════════════════════════════════════════════════════════

@bp.route("/")
def home():
    return render()


@bp.route("/generate", methods=["POST"])
def generate():
    gs = _session()
    form = QuoteForm.from_mapping(request.form)
    preview = request.form.get("action", "preview") != "download"

    bad_dates = invalid_date_parts(form)
    if bad_dates:
        err = InvalidDate(bad_dates)
        log.info("Rejected date field(s): %s", ", ".join(bad_dates))
        return render(form, status=_STATUS[err.kind], error=err.message)

    result = gs.generate(form, preview=preview)
    if not result["ok"]:
        return render(form, status=_STATUS.get(result["kind"], 500),
                      error=result["error"])

    if preview:
        gs.last_preview = result["pdf"]
        preview_url = url_for("presupuestos.preview_pdf", n=gs.numero, t=int(time.time()))
        return render(form, preview_url=preview_url)

    return send_file(io.BytesIO(result["pdf"]), mimetype="application/pdf",
                     as_attachment=True, download_name=result["filename"])


@bp.route("/preview.pdf")
def preview_pdf():
    pdf = getattr(_session(), "last_preview", None)
    if not pdf:
        abort(404)
    return send_file(io.BytesIO(pdf), mimetype="application/pdf", as_attachment=False,
                     download_name="preview.pdf")


# ═══════════════════════════════════════════════════════════════════════
# API
# ═══════════════════════════════════════════════════════════════════════

@bp.route("/api/health")
def api_health():
    gs = _session()
    background = gs.background_path
    checks = {
        "background": bool(background) and os.path.isfile(background),
        "counter_persistent": gs.counter_backend != "memory",
    }
    status = "ok" if all(checks.values()) else "degraded"
    return jsonify({"status": status, "numero": gs.numero,
                    "counter_backend": gs.counter_backend,
                    "state": gs.state, "checks": checks})


@bp.route("/api/counter")
def api_counter():
    return jsonify({"numero": _session().numero})
