"""
Shared pytest fixtures for the Presupuestos test suite.

IMPORTANT: PRESUPUESTOS_DATA_DIR is pointed at a throwaway directory BEFORE
any presupuestos import, so importing app.py never touches the real data/.
"""
import io
import os
import sys
import tempfile
import pytest

_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

os.environ["PRESUPUESTOS_DATA_DIR"] = tempfile.mkdtemp(prefix="presupuestos-test-")


# ── Temp data directory (per-test isolation) ──────────────────────────────────

@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def output_dir(data_dir):
    return str(data_dir / "output")


@pytest.fixture
def background_png(tmp_path):
    """A blank A4-proportioned PNG standing in for fondobase.png."""
    from PIL import Image
    path = tmp_path / "fondobase.png"
    Image.new("RGB", (210, 297), "white").save(path)
    return str(path)


@pytest.fixture
def config():
    from presupuestos.core.config import DEFAULTS
    return dict(DEFAULTS)


@pytest.fixture
def counter_store(data_dir):
    from presupuestos.core.counter import JsonCounterStore
    return JsonCounterStore(str(data_dir / "counter.json"))


@pytest.fixture
def session(counter_store, output_dir, background_png, config):
    from presupuestos.forms.session import GenerationSession
    return GenerationSession(counter_store, output_dir=output_dir,
                             background_path=background_png, config=config)


# ── Flask test client ─────────────────────────────────────────────────────────

@pytest.fixture
def app(counter_store, output_dir, background_png, config):
    """Create Flask app configured for testing."""
    from app import create_app
    flask_app = create_app(counter_store=counter_store, output_dir=output_dir,
                           background_path=background_png, config=config,
                           configure_logging=False)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


# ── Sample data factories ─────────────────────────────────────────────────────

@pytest.fixture
def sample_form_data():
    """Raw form fields as the browser posts them."""
    return {
        "cliente": "Acme",
        "dia": "05",
        "mes": "Mayo",
        "año": "2024",
        "precio": "$500",
        "descripcion": "Line1\nLine2",
        "incluye": "materiales",
    }


@pytest.fixture
def sample_form(sample_form_data):
    from presupuestos.forms.quote_form import QuoteForm
    return QuoteForm.from_mapping(sample_form_data)


# ── PDF helpers ───────────────────────────────────────────────────────────────

@pytest.fixture
def pdf_pages_text():
    """Return a function: PDF bytes → list of per-page extracted text."""
    import pdfplumber

    def _extract(pdf_bytes):
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            return [page.extract_text() or "" for page in pdf.pages]
    return _extract
