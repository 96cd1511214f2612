"""
Errores de dominio del servicio RFID.

Cada error lleva un `reason` legible por máquina y el código HTTP con el que
lo expone la API (ver `api/errors.py`).
"""


class RfidServiceError(Exception):
    """Base de los errores que se devuelven al cliente con un `reason`."""
    reason = "internal_error"
    status_code = 500

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason


class ValidationFailed(RfidServiceError):
    """Parámetro faltante o mal formado; no produce efectos."""
    reason = "validation_failed"
    status_code = 400


class AlreadyRegistered(RfidServiceError):
    reason = "already_registered"
    status_code = 409

    def __init__(self, tag_id: str):
        super().__init__(f"RFID {tag_id} already registered")
        self.tag_id = tag_id


class StoreUnavailable(RfidServiceError):
    """La base de datos no pudo completar la operación (rollback hecho)."""
    reason = "store_unavailable"
    status_code = 503
