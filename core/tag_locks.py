"""
Registro de locks por tag RFID.

Este módulo define un `TagLockRegistry` que mantiene en memoria un lock por
`tag_id` (tag_id -> lock) para serializar las operaciones sobre un mismo tag.
Los locks se crean bajo demanda y se descartan cuando nadie los usa.
"""
import threading
from contextlib import contextmanager


class TagLockRegistry:
    """Administra locks por `tag_id` con conteo de referencias."""
    def __init__(self):
        self._guard = threading.Lock()
        # Estructura: tag_id -> [lock, usuarios]
        self._locks: dict[str, list] = {}

    def _acquire_entry(self, tag_id: str) -> threading.Lock:
        with self._guard:
            entry = self._locks.get(tag_id)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[tag_id] = entry
            entry[1] += 1
            return entry[0]

    def _release_entry(self, tag_id: str) -> None:
        with self._guard:
            entry = self._locks[tag_id]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[tag_id]

    @contextmanager
    def hold(self, tag_id: str):
        """Bloquea `tag_id` durante el bloque `with`."""
        lock = self._acquire_entry(tag_id)
        try:
            with lock:
                yield
        finally:
            self._release_entry(tag_id)

    def active(self) -> list[str]:
        """Devuelve los `tag_id` con un lock tomado o en espera."""
        with self._guard:
            return list(self._locks.keys())


# Instancia singleton para usar en toda la aplicación
tag_locks = TagLockRegistry()
