"""
Reconciliador de estados RFID.

Aplica una petición de cambio de estado sobre el registro del tag, deja una
entrada en el log y publica exactamente un mensaje MQTT con el resultado
("1", "0" o "-1" si el tag no está registrado). También da de alta tags
nuevos (sin publicar).

Orden de cada operación, con el lock del tag tomado:

1. update-if-present en `rfid_registrations`.
2. append en `rfid_logs` con el timestamp normalizado.

Fuera del lock se despacha la publicación. Un fallo del log o del publish no
revierte el registro: se devuelve como warning.
"""
import logging
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field

from core.clock import ReportingClock
from core.errors import AlreadyRegistered, StoreUnavailable
from core.status import TagStatus, coerce_status, require_tag_id
from core.tag_locks import tag_locks as default_tag_locks
from database import crud
from database.models import RfidLogEntry, RfidRegistration

logger = logging.getLogger("core.reconciler")

UPDATED = "updated"
NOT_FOUND = "not_found"

LOG_WRITE_FAILED = "log_write_failed"
PUBLISH_FAILED = "publish_failed"
PUBLISH_TIMEOUT = "publish_timeout"


@dataclass
class ReconcileResult:
    outcome: str
    tag_id: str
    new_status: TagStatus
    previous_status: bool | None = None
    registration: RfidRegistration | None = None
    log: RfidLogEntry | None = None
    published: str | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass
class RegistrationResult:
    registration: RfidRegistration
    log: RfidLogEntry | None = None
    warnings: list[str] = field(default_factory=list)


class StatusReconciler:
    """
    Pipeline validar -> persistir -> loguear -> publicar.

    `session_factory` crea una sesión SQLAlchemy por operación; `gateway`
    debe exponer `dispatch(payload) -> Future[PublishOutcome]`.
    """

    def __init__(self, session_factory, gateway, clock=None, locks=None, publish_timeout: float = 2.0):
        self.session_factory = session_factory
        self.gateway = gateway
        self.clock = clock or ReportingClock()
        self.locks = locks or default_tag_locks
        self.publish_timeout = publish_timeout

    def register(self, tag_id, initial_status=True) -> RegistrationResult:
        """Da de alta un tag y escribe su log inicial; no publica."""
        tag_id = require_tag_id(tag_id)
        status = coerce_status(initial_status)

        db = self.session_factory()
        try:
            with self.locks.hold(tag_id):
                reg, created = crud.insert_registration_if_absent(db, tag_id, status)
                if not created:
                    logger.info(f"RFID {tag_id} already registered")
                    raise AlreadyRegistered(tag_id)
                result = RegistrationResult(registration=reg)
                result.log = self._append_log(db, tag_id, TagStatus.from_bool(status), result.warnings)
            logger.info(f"RFID {tag_id} registered with status={status}")
            return result
        finally:
            db.close()

    def reconcile(self, tag_id, requested_status) -> ReconcileResult:
        """Aplica `requested_status` al tag; un tag desconocido no es error."""
        tag_id = require_tag_id(tag_id)
        status = coerce_status(requested_status)

        db = self.session_factory()
        try:
            with self.locks.hold(tag_id):
                updated = crud.update_registration_if_present(db, tag_id, status)
                if updated is None:
                    result = ReconcileResult(
                        outcome=NOT_FOUND,
                        tag_id=tag_id,
                        new_status=TagStatus.UNKNOWN,
                    )
                    logger.info(f"RFID {tag_id} not found, logging as unknown")
                else:
                    reg, previous = updated
                    result = ReconcileResult(
                        outcome=UPDATED,
                        tag_id=tag_id,
                        new_status=TagStatus.from_bool(status),
                        previous_status=previous,
                        registration=reg,
                    )
                    logger.info(f"RFID {tag_id} status {previous} -> {status}")
                result.log = self._append_log(db, tag_id, result.new_status, result.warnings)
                future = self._dispatch(result.new_status.payload, result.warnings)
        finally:
            db.close()

        if future is not None:
            self._await_publish(future, result)
        return result

    def _append_log(self, db, tag_id: str, status: TagStatus, warnings: list[str]) -> RfidLogEntry | None:
        try:
            return crud.append_log(db, tag_id, status.column_value, self.clock())
        except StoreUnavailable as e:
            logger.warning(f"Log entry for RFID {tag_id} not written: {e}")
            warnings.append(LOG_WRITE_FAILED)
            return None

    def _dispatch(self, payload: str, warnings: list[str]):
        # se encola dentro del lock para conservar el orden por tag
        try:
            return self.gateway.dispatch(payload)
        except RuntimeError as e:
            logger.warning(f"Could not dispatch MQTT payload {payload!r}: {e}")
            warnings.append(PUBLISH_FAILED)
            return None

    def _await_publish(self, future, result: ReconcileResult) -> None:
        try:
            outcome = future.result(timeout=self.publish_timeout)
        except FutureTimeout:
            logger.warning(f"MQTT publish for RFID {result.tag_id} still pending after {self.publish_timeout}s")
            result.warnings.append(PUBLISH_TIMEOUT)
            return
        except Exception as e:
            # el registro y el log ya están confirmados
            logger.warning(f"MQTT publish for RFID {result.tag_id} raised: {e!r}")
            result.warnings.append(PUBLISH_FAILED)
            return
        if outcome.ok:
            result.published = outcome.payload
        else:
            logger.warning(f"MQTT publish for RFID {result.tag_id} failed: {outcome.error}")
            result.warnings.append(PUBLISH_FAILED)
