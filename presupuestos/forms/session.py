"""
One user's generation session: validate → compose → preview or finalize.

The session owns the running document number, the single error-message
slot shown on the form, and an in-flight guard so a second trigger while a
presupuesto is being composed is rejected instead of racing the counter.
"""

import os
import logging
import threading

from presupuestos.core.config import load_config
from presupuestos.core.counter import MemoryCounterStore
from presupuestos.core.errors import (PresupuestoError, GenerationInProgress,
                                      StorageUnavailable)
from presupuestos.forms.quote_form import validate_form
from presupuestos.forms.presupuesto_generator import compose_presupuesto

log = logging.getLogger("presupuestos.session")

# Generation states
IDLE = "idle"
VALIDATING = "validating"
REJECTED = "rejected"
COMPOSING = "composing"
RENDERED = "rendered"
PREVIEW = "preview"
FINALIZED = "finalized"
FAILED = "failed"

COUNTER_NOT_PERSISTED = ("El número de presupuesto no se está guardando: la numeración "
                         "volverá a empezar al reiniciar la aplicación.")


class GenerationSession:

    def __init__(self, counter_store, output_dir: str, background_path: str = None,
                 config: dict = None):
        self.counter_store = counter_store
        self.output_dir = output_dir
        self.background_path = background_path
        self.config = config or load_config()
        self.numero = counter_store.load()
        self.state = IDLE
        self.error_message = ""
        self.warning = COUNTER_NOT_PERSISTED if self.counter_backend == "memory" else ""
        self.last_preview = None
        self._in_flight = threading.Lock()
        log.info("Session ready: next presupuesto Nº %d (%s counter)",
                 self.numero, getattr(counter_store, "backend", "?"))

    @property
    def counter_backend(self) -> str:
        return getattr(self.counter_store, "backend", "unknown")

    def _fail(self, err: PresupuestoError, state: str) -> dict:
        self.state = state
        self.error_message = err.message
        return {"ok": False, "kind": err.kind, "error": err.message, "state": state}

    def generate(self, form, preview: bool = True) -> dict:
        """Run one generation request.

        Returns the composer's result dict plus "state" and, when finalized,
        "path"; on failure {"ok": False, "kind", "error", "state"}.
        """
        if not self._in_flight.acquire(blocking=False):
            err = GenerationInProgress()
            log.warning("Generation rejected: another one is in progress")
            return {"ok": False, "kind": err.kind, "error": err.message,
                    "state": self.state}
        try:
            return self._generate(form, preview)
        finally:
            self._in_flight.release()

    def _generate(self, form, preview: bool) -> dict:
        self.state = VALIDATING
        try:
            validate_form(form)
        except PresupuestoError as e:
            return self._fail(e, REJECTED)
        self.error_message = ""

        self.state = COMPOSING
        numero = self.numero
        try:
            result = compose_presupuesto(form, numero,
                                         background_path=self.background_path,
                                         config=self.config)
        except PresupuestoError as e:
            return self._fail(e, FAILED)
        self.state = RENDERED

        if preview:
            self.state = PREVIEW
            result["state"] = PREVIEW
            log.info("Preview Nº %d for %s (%d page(s))", numero, form.cliente,
                     result["pages"], extra={"numero": numero, "cliente": form.cliente,
                                             "preview": True, "pages": result["pages"]})
            return result

        return self._finalize(form, numero, result)

    def _finalize(self, form, numero: int, result: dict) -> dict:
        path = os.path.join(self.output_dir, result["filename"])
        try:
            os.makedirs(self.output_dir, exist_ok=True)
            with open(path, "wb") as f:
                f.write(result["pdf"])
        except OSError as e:
            # the download itself is served from memory
            log.error("Could not archive %s: %s", path, e)
            path = ""
        result["path"] = path

        self.numero = numero + 1
        try:
            self.counter_store.save(self.numero)
        except StorageUnavailable as e:
            log.warning("%s; continuing with in-memory counter", e)
            self.counter_store = MemoryCounterStore(self.numero)
            self.warning = f"{e.message} {COUNTER_NOT_PERSISTED}"
            result["warning"] = self.warning

        self.state = FINALIZED
        result["state"] = FINALIZED
        log.info("Presupuesto Nº %d finalized for %s → %s", numero, form.cliente, path,
                 extra={"numero": numero, "cliente": form.cliente, "preview": False,
                        "pages": result["pages"]})
        return result
