"""
Integration tests for the Flask routes in presupuestos/api/dashboard.py.
Covers the form page, both buttons (preview / download) and the JSON API.
"""
import pytest

from presupuestos.core.counter import MemoryCounterStore
from presupuestos.core.errors import StorageUnavailable


def _counter(client):
    return client.get("/api/counter").get_json()["numero"]


# ═══════════════════════════════════════════════════════════════════════════════
# FORM PAGE
# ═══════════════════════════════════════════════════════════════════════════════

class TestHomePage:

    def test_loads(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert "Presupuesto" in r.get_data(as_text=True)

    def test_shows_number(self, client, counter_store):
        counter_store.save(1)
        assert "Nº 1" in client.get("/").get_data(as_text=True)

    def test_has_both_actions(self, client):
        html = client.get("/").get_data(as_text=True)
        assert 'value="preview"' in html
        assert 'value="download"' in html

    def test_no_preview_before_generating(self, client):
        assert client.get("/preview.pdf").status_code == 404


# ═══════════════════════════════════════════════════════════════════════════════
# PREVIEW
# ═══════════════════════════════════════════════════════════════════════════════

class TestPreview:

    def test_preview_embeds_pdf(self, client, sample_form_data):
        r = client.post("/generate", data=dict(sample_form_data, action="preview"))
        assert r.status_code == 200
        html = r.get_data(as_text=True)
        assert "<iframe" in html
        assert "/preview.pdf" in html

    def test_preview_pdf_served_inline(self, client, sample_form_data):
        client.post("/generate", data=dict(sample_form_data, action="preview"))
        r = client.get("/preview.pdf")
        assert r.status_code == 200
        assert r.mimetype == "application/pdf"
        assert r.data.startswith(b"%PDF")
        assert "attachment" not in r.headers.get("Content-Disposition", "")

    def test_preview_keeps_counter(self, client, sample_form_data):
        client.post("/generate", data=dict(sample_form_data, action="preview"))
        assert _counter(client) == 1

    def test_preview_keeps_user_values(self, client, sample_form_data):
        r = client.post("/generate", data=dict(sample_form_data, action="preview"))
        html = r.get_data(as_text=True)
        assert 'value="Acme"' in html
        assert "materiales" in html


# ═══════════════════════════════════════════════════════════════════════════════
# DOWNLOAD
# ═══════════════════════════════════════════════════════════════════════════════

class TestDownload:

    def test_download_attachment(self, client, sample_form_data):
        r = client.post("/generate", data=dict(sample_form_data, action="download"))
        assert r.status_code == 200
        assert r.mimetype == "application/pdf"
        assert r.data.startswith(b"%PDF")
        cd = r.headers["Content-Disposition"]
        assert "attachment" in cd
        assert "Presupuesto_1_Acme.pdf" in cd

    def test_download_bumps_counter(self, client, sample_form_data, counter_store):
        client.post("/generate", data=dict(sample_form_data, action="download"))
        assert _counter(client) == 2
        assert counter_store.load() == 2

    def test_second_download_uses_next_number(self, client, sample_form_data):
        client.post("/generate", data=dict(sample_form_data, action="download"))
        r = client.post("/generate", data=dict(sample_form_data, action="download"))
        assert "Presupuesto_2_Acme.pdf" in r.headers["Content-Disposition"]


# ═══════════════════════════════════════════════════════════════════════════════
# ERRORS
# ═══════════════════════════════════════════════════════════════════════════════

class TestErrors:

    def test_missing_field_shows_message(self, client, sample_form_data):
        sample_form_data["cliente"] = ""
        r = client.post("/generate", data=dict(sample_form_data, action="download"))
        assert r.status_code == 400
        assert "complete todos los campos obligatorios" in r.get_data(as_text=True)
        assert _counter(client) == 1

    def test_non_numeric_day_rejected(self, client, sample_form_data):
        sample_form_data["dia"] = "5a"
        r = client.post("/generate", data=dict(sample_form_data, action="preview"))
        assert r.status_code == 400
        assert "La fecha no es válida" in r.get_data(as_text=True)

    def test_bad_month_gets_date_message(self, client, sample_form_data):
        sample_form_data["mes"] = "Mayo."
        r = client.post("/generate", data=dict(sample_form_data, action="download"))
        html = r.get_data(as_text=True)
        assert r.status_code == 400
        assert "La fecha no es válida" in html
        assert "complete todos los campos" not in html
        assert 'value="Mayo."' in html
        assert _counter(client) == 1

    def test_busy_session_shows_message(self, app, client, sample_form_data):
        gs = app.extensions["presupuestos"]
        gs._in_flight.acquire()
        try:
            r = client.post("/generate", data=dict(sample_form_data, action="download"))
        finally:
            gs._in_flight.release()
        assert r.status_code == 409
        assert "Ya se está generando" in r.get_data(as_text=True)
        assert gs.error_message == ""

    def test_counter_save_failure_warned_on_form(self, output_dir, background_png,
                                                 config, sample_form_data):
        from app import create_app

        class BrokenStore(MemoryCounterStore):
            backend = "json"

            def save(self, value):
                raise StorageUnavailable("disk full")

        app = create_app(counter_store=BrokenStore(), output_dir=output_dir,
                         background_path=background_png, config=config,
                         configure_logging=False)
        with app.test_client() as c:
            assert "disk full" not in c.get("/").get_data(as_text=True)
            r = c.post("/generate", data=dict(sample_form_data, action="download"))
            assert r.status_code == 200
            html = c.get("/").get_data(as_text=True)
        assert "disk full" in html
        assert "volverá a empezar" in html

    def test_error_cleared_on_success(self, client, sample_form_data):
        client.post("/generate", data={"action": "preview"})
        r = client.post("/generate", data=dict(sample_form_data, action="preview"))
        assert "complete todos los campos" not in r.get_data(as_text=True)

    def test_missing_background(self, tmp_path, counter_store, output_dir, config, sample_form_data):
        from app import create_app
        app = create_app(counter_store=counter_store, output_dir=output_dir,
                         background_path=str(tmp_path / "gone.png"), config=config,
                         configure_logging=False)
        with app.test_client() as c:
            r = c.post("/generate", data=dict(sample_form_data, action="download"))
            assert r.status_code == 503
            assert "imagen de fondo" in r.get_data(as_text=True)
            assert c.get("/api/health").get_json()["status"] == "degraded"


# ═══════════════════════════════════════════════════════════════════════════════
# API
# ═══════════════════════════════════════════════════════════════════════════════

class TestAPI:

    def test_health_ok(self, client):
        d = client.get("/api/health").get_json()
        assert d["status"] == "ok"
        assert d["counter_backend"] == "json"
        assert d["numero"] == 1

    def test_health_degraded_with_memory_counter(self, output_dir, background_png, config):
        from app import create_app
        app = create_app(counter_store=MemoryCounterStore(), output_dir=output_dir,
                         background_path=background_png, config=config,
                         configure_logging=False)
        with app.test_client() as c:
            d = c.get("/api/health").get_json()
        assert d["status"] == "degraded"
        assert d["counter_backend"] == "memory"

    def test_counter(self, client):
        assert client.get("/api/counter").get_json() == {"numero": 1}
