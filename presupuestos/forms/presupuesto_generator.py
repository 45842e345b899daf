"""
Presupuesto PDF Generator
=========================
Fixed single-page A4 template drawn over a background image:

  - Nº and date right-aligned, "Presupuesto {cliente}" title
  - Intro sentence, centered
  - "Descripción" heading + bordered box with the user's description,
    vertically centered inside the box
  - Legal block (price, includes, deposit, closing, signature)
  - "i / N" footer on every physical page

Overflow policy: description/legal lines past the bottom cut-off are
dropped, never moved to a new page.
"""

import io
import os
import re
import logging

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.colors import Color, black
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from presupuestos.core.config import load_config
from presupuestos.core.errors import AssetLoadFailure
from presupuestos.core.paths import BACKGROUND_PATH
from presupuestos.forms.text_layout import split_line, wrap_lines, centered_start

log = logging.getLogger("presupuestos.generator")

FONT = "Helvetica"
FOOTER_GRAY = Color(80 / 255, 80 / 255, 80 / 255)

# ═══════════════════════════════════════════════════════════════════════════════
# TEMPLATE: top-origin millimetres on A4 (210 x 297)
# ═══════════════════════════════════════════════════════════════════════════════
LAYOUT = {
    "page_width":      210,
    "page_height":     297,
    "margin_left":     20,
    "margin_right":    20,
    "title_y":         67.5,
    "date_y":          72.5,
    "number_y":        283,
    "top_content_y":   90,
    "bottom_y":        290,
    "line_height":     6,
    "intro_gap":       8,     # intro block → "Descripción"
    "heading_gap":     6,     # "Descripción" → box
    "padding_top":     6,
    "padding_bottom":  6,
    "legal_gap":       12,    # box → legal block
    "paragraph_gap":   2,
    "desc_cutoff":     20,    # description not drawn below bottom_y - 20
    "legal_cutoff":    10,    # legal block not drawn below bottom_y - 10
    "box_line_width":  0.5,
    "footer_x":        5,
    "footer_y":        293,
}

SIZES = {"number": 11, "date": 11, "title": 16, "intro": 11.5,
         "heading": 13, "body": 11, "footer": 10}


class NumberedCanvas(canvas.Canvas):
    """Canvas that stamps "i / N" on every page once N is known.

    Pages are buffered on showPage(); call showPage() before save() so the
    last page is included.
    """

    def __init__(self, *args, **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []
        self.page_count = 0

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        num_pages = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_page_number(num_pages)
            canvas.Canvas.showPage(self)
        self.page_count = num_pages
        canvas.Canvas.save(self)

    def draw_page_number(self, page_count):
        self.setFont(FONT, SIZES["footer"])
        self.setFillColor(FOOTER_GRAY)
        page_h = self._pagesize[1]
        self.drawString(LAYOUT["footer_x"] * mm, page_h - LAYOUT["footer_y"] * mm,
                        f"{self._pageNumber} / {page_count}")


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def load_background(path: str) -> ImageReader:
    """Open the template background. Raises AssetLoadFailure before any drawing."""
    if not path or not os.path.isfile(path):
        log.error("Background image not found: %s", path)
        raise AssetLoadFailure(path)
    try:
        img = ImageReader(path)
        img.getSize()
    except Exception as e:
        log.error("Background image %s unreadable: %s", path, e)
        raise AssetLoadFailure(path) from e
    return img


def legal_paragraphs(form, config: dict) -> list:
    """Closing block; "" entries are blank-line separators."""
    return [
        f"- El costo total del presupuesto es de {form.precio}.",
        "",
        f"- El presente presupuesto incluye {form.incluye}.",
        "",
        f"- Para la confirmación del trabajo, requerimos una seña del "
        f"{config['seña_pct']}% del total del presupuesto.",
        "",
        "Por favor, no dude en ponerse en contacto con nosotros si tiene alguna "
        "pregunta o necesita aclaraciones adicionales.",
        "Agradecemos su confianza en nosotros y esperamos poder servirle pronto.",
        "",
        "Atentamente,",
        config["firma"],
    ]


def presupuesto_filename(numero: int, cliente: str) -> str:
    """Presupuesto_{numero}_{cliente}.pdf, with path separators neutralised."""
    safe = re.sub(r"[\\/]+", "-", cliente.strip())
    return f"Presupuesto_{numero}_{safe}.pdf"


# ═══════════════════════════════════════════════════════════════════════════════
# PDF GENERATOR
# ═══════════════════════════════════════════════════════════════════════════════

def compose_presupuesto(form, numero: int, background_path: str = None,
                        config: dict = None, layout: dict = None) -> dict:
    """Render one presupuesto. The form must already be validated.

    Returns:
        {"ok": True, "pdf": bytes, "pages": int, "lines_drawn": int,
         "desc_lines_dropped": int, "legal_lines_dropped": int,
         "lines_dropped": int, "box": {...}, "filename": str}
    Raises:
        AssetLoadFailure when the background image cannot be loaded.
    """
    L = layout or LAYOUT
    cfg = config or load_config()
    background = load_background(background_path or BACKGROUND_PATH)

    page_w, page_h = L["page_width"], L["page_height"]
    ml, mr = L["margin_left"], L["margin_right"]
    content_w = page_w - ml - mr
    lh = L["line_height"]
    center_x = page_w / 2 * mm

    buf = io.BytesIO()
    c = NumberedCanvas(buf, pagesize=A4)
    c.setTitle(f"Presupuesto {numero} {form.cliente}")
    c.setAuthor(cfg["firma"])

    # top-origin mm → reportlab bottom-origin points
    def Y(top_mm):
        return A4[1] - top_mm * mm

    # ── 1. Background ─────────────────────────────────────────────────────────
    c.drawImage(background, 0, 0, width=page_w * mm, height=page_h * mm)

    # ── 2. Number + date ──────────────────────────────────────────────────────
    c.setFillColor(black)
    c.setFont(FONT, SIZES["number"])
    c.drawRightString((page_w - mr) * mm, Y(L["number_y"]), f"Nº {numero}")
    c.setFont(FONT, SIZES["date"])
    c.drawRightString((page_w - mr) * mm, Y(L["date_y"]), form.fecha_texto)

    # ── 3. Title ──────────────────────────────────────────────────────────────
    c.setFont(FONT, SIZES["title"])
    c.drawString(ml * mm, Y(L["title_y"]), f"Presupuesto {form.cliente}")

    # ── 4. Intro ──────────────────────────────────────────────────────────────
    c.setFont(FONT, SIZES["intro"])
    intro = split_line(cfg["intro"], content_w, FONT, SIZES["intro"])
    y = L["top_content_y"]
    for ln in intro:
        c.drawCentredString(center_x, Y(y), ln)
        y += lh
    intro_h = len(intro) * lh

    # ── 5. "Descripción" heading ──────────────────────────────────────────────
    y_desc = L["top_content_y"] + intro_h + L["intro_gap"]
    c.setFont(FONT, SIZES["heading"])
    c.drawCentredString(center_x, Y(y_desc), "Descripción")

    # ── 6. Description box ────────────────────────────────────────────────────
    desc = wrap_lines(form.descripcion.split("\n"), content_w, lh, FONT, SIZES["body"])
    rect_y = y_desc + L["heading_gap"]
    rect_h = desc["total_height"] + L["padding_top"] + L["padding_bottom"]
    c.setStrokeColor(black)
    c.setLineWidth(L["box_line_width"] * mm)
    c.rect(ml * mm, Y(rect_y + rect_h), content_w * mm, rect_h * mm, stroke=1, fill=0)

    # ── 7. Description text (overflow dropped) ────────────────────────────────
    y_start = centered_start(rect_y, rect_h, desc["total_height"],
                             L["padding_top"], L["padding_bottom"])
    box_center_x = (ml + content_w / 2) * mm
    desc_cut = L["bottom_y"] - L["desc_cutoff"]
    drawn = desc_dropped = 0
    c.setFont(FONT, SIZES["body"])
    y = y_start
    for parts in desc["wrapped_lines"]:
        if not parts:
            y += lh
            continue
        for part in parts:
            if y > desc_cut:
                desc_dropped += 1
                continue
            c.drawCentredString(box_center_x, Y(y), part)
            drawn += 1
            y += lh

    # ── 8. Legal block (overflow dropped) ─────────────────────────────────────
    legal = wrap_lines(legal_paragraphs(form, cfg), content_w, lh, FONT, SIZES["body"])
    legal_cut = L["bottom_y"] - L["legal_cutoff"]
    legal_dropped = 0
    y = rect_y + rect_h + L["legal_gap"]
    for parts in legal["wrapped_lines"]:
        # a blank separator still occupies one line slot
        for part in parts or [""]:
            if y > legal_cut:
                if part:
                    legal_dropped += 1
                continue
            if part:
                c.drawCentredString(center_x, Y(y), part)
                drawn += 1
            y += lh
        y += L["paragraph_gap"]

    # ── 9–10. Footers + export ────────────────────────────────────────────────
    c.showPage()
    c.save()
    pdf = buf.getvalue()

    dropped = desc_dropped + legal_dropped
    if dropped:
        log.warning("Presupuesto %s: %d line(s) past the bottom margin were dropped",
                    numero, dropped, extra={"numero": numero, "dropped": dropped})

    return {
        "ok": True,
        "pdf": pdf,
        "pages": c.page_count,
        "numero": numero,
        "filename": presupuesto_filename(numero, form.cliente),
        "lines_drawn": drawn,
        "desc_lines_dropped": desc_dropped,
        "legal_lines_dropped": legal_dropped,
        "lines_dropped": dropped,
        "box": {"top": rect_y, "height": rect_h, "text_start": y_start,
                "text_height": desc["total_height"]},
    }
