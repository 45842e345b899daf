"""
Document number persistence.

The running presupuesto number is a single integer stored under a fixed key
in counter.json. When the data directory is not writable the app keeps
working with an in-memory counter that resets on restart.
"""

import os
import json
import logging

from presupuestos.core.errors import StorageUnavailable

log = logging.getLogger("presupuestos.counter")

COUNTER_KEY = "presupuestoN"


class MemoryCounterStore:
    """Process-local counter; nothing survives a restart."""
    backend = "memory"

    def __init__(self, default: int = 1):
        self._value = default

    def load(self) -> int:
        return self._value

    def save(self, value: int):
        self._value = int(value)


class JsonCounterStore:
    """Counter persisted as {key: n} in a JSON file."""
    backend = "json"

    def __init__(self, path: str, key: str = COUNTER_KEY, default: int = 1):
        self.path = path
        self.key = key
        self.default = default

    def _read(self) -> dict:
        try:
            with open(self.path) as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            log.warning("Counter file %s is corrupt (%s); numbering restarts at %d "
                        "and may repeat issued numbers", self.path, e, self.default)
            return {}
        except OSError as e:
            log.warning("Counter file %s unreadable: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Counter file %s is not a JSON object; numbering restarts at %d",
                        self.path, self.default)
            return {}
        return data

    def load(self) -> int:
        data = self._read()
        if self.key not in data:
            return self.default
        raw = data[self.key]
        try:
            value = int(raw)
        except (TypeError, ValueError):
            value = 0
        if value < 1:
            log.warning("Counter file %s holds invalid %s=%r; numbering restarts at %d",
                        self.path, self.key, raw, self.default)
            return self.default
        return value

    def save(self, value: int):
        data = self._read()
        data[self.key] = int(value)
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise StorageUnavailable(f"No se pudo guardar el contador en {self.path}: {e}") from e


def _writable(directory: str) -> bool:
    test_file = os.path.join(directory, ".counter_test")
    try:
        os.makedirs(directory, exist_ok=True)
        with open(test_file, "w") as f:
            f.write("ok")
        os.remove(test_file)
    except OSError:
        return False
    return True


def open_counter_store(path: str, key: str = COUNTER_KEY, default: int = 1):
    """JSON store when its directory is writable, else an in-memory one."""
    if _writable(os.path.dirname(path) or "."):
        return JsonCounterStore(path, key=key, default=default)
    log.warning("Counter storage unavailable at %s, using in-memory counter "
                "starting at %d", path, default)
    return MemoryCounterStore(default)
