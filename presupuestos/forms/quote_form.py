"""
Presupuesto form data, required-field validation and date input filters.
"""

import re
import logging

from presupuestos.core.errors import MissingFields

log = logging.getLogger("presupuestos.form")

REQUIRED_FIELDS = ("cliente", "dia", "mes", "año", "precio", "descripcion", "incluye")

# Input-time constraints for the date sub-fields: (pattern, max length)
DATE_PART_RULES = {
    "dia": (re.compile(r"^\d*$"), 2),
    "mes": (re.compile(r"^[a-zA-Z]*$"), None),
    "año": (re.compile(r"^\d*$"), 4),
}


class QuoteForm:
    """One presupuesto request as typed by the user. Never persisted."""

    def __init__(self, cliente="", dia="", mes="", año="", precio="",
                 descripcion="", incluye=""):
        self.cliente = cliente
        self.fecha = {"dia": dia, "mes": mes, "año": año}
        self.precio = precio
        self.descripcion = descripcion
        self.incluye = incluye

    @classmethod
    def from_mapping(cls, data) -> "QuoteForm":
        """Build from request.form / JSON. Accepts 'anio' for 'año'."""
        def get(key):
            v = data.get(key)
            return "" if v is None else str(v)
        descripcion = get("descripcion").replace("\r\n", "\n").replace("\r", "\n")
        return cls(
            cliente=get("cliente"),
            dia=get("dia"),
            mes=get("mes"),
            año=get("año") or get("anio"),
            precio=get("precio"),
            descripcion=descripcion,
            incluye=get("incluye"),
        )

    @property
    def fecha_texto(self) -> str:
        return f"{self.fecha['dia']} {self.fecha['mes']} {self.fecha['año']}"

    def to_dict(self) -> dict:
        return {
            "cliente": self.cliente,
            "dia": self.fecha["dia"],
            "mes": self.fecha["mes"],
            "año": self.fecha["año"],
            "precio": self.precio,
            "descripcion": self.descripcion,
            "incluye": self.incluye,
        }


def missing_fields(form: QuoteForm) -> list:
    """Names of required fields that are blank after trimming."""
    values = form.to_dict()
    return [name for name in REQUIRED_FIELDS if not values[name].strip()]


def validate_form(form: QuoteForm):
    """Raise MissingFields if any required field is blank."""
    missing = missing_fields(form)
    if missing:
        log.info("Validation failed, missing: %s", ", ".join(missing))
        raise MissingFields(missing)


def filter_date_part(name: str, new_value: str, old_value: str = "") -> str:
    """Accept a keystroke in a date sub-field, or keep the previous value.

    dia/año take digits only, mes takes letters only.
    """
    if name not in DATE_PART_RULES:
        raise ValueError(f"Unknown date field: {name}")
    pattern, max_len = DATE_PART_RULES[name]
    if not pattern.match(new_value):
        return old_value
    if max_len is not None and len(new_value) > max_len:
        return old_value
    return new_value


def invalid_date_parts(form: QuoteForm) -> list:
    """Date sub-fields whose submitted value the input filter would refuse."""
    bad = []
    for name in DATE_PART_RULES:
        value = form.fecha[name].strip()
        if filter_date_part(name, value, None) is None:
            bad.append(name)
    return bad
