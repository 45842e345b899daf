"""
Error taxonomy for presupuesto generation.

Every error carries a stable ``kind`` (used in result dicts and logs) and a
user-facing Spanish message shown in the form's single error slot.
"""


class PresupuestoError(Exception):
    kind = "error"
    default_message = "No se pudo generar el presupuesto."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingFields(PresupuestoError):
    kind = "missing_fields"
    default_message = ("Por favor, complete todos los campos obligatorios: "
                       "Cliente, Fecha, Precio, Descripción e Incluye.")

    def __init__(self, fields=(), message=None):
        self.fields = list(fields)
        super().__init__(message)


class AssetLoadFailure(PresupuestoError):
    kind = "asset_load_failure"
    default_message = "No se pudo cargar la imagen de fondo del presupuesto."

    def __init__(self, path="", message=None):
        self.path = path
        super().__init__(message)


class StorageUnavailable(PresupuestoError):
    kind = "storage_unavailable"
    default_message = "No se pudo guardar el número de presupuesto."


class GenerationInProgress(PresupuestoError):
    kind = "generation_in_progress"
    default_message = "Ya se está generando un presupuesto, espere a que termine."


class InvalidDate(PresupuestoError):
    kind = "invalid_date"
    default_message = ("La fecha no es válida: el día y el año llevan solo números "
                       "y el mes solo letras.")

    def __init__(self, fields=(), message=None):
        self.fields = list(fields)
        super().__init__(message)
