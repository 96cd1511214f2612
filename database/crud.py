"""
Funciones de acceso y manipulación de datos (CRUD) para registros y logs RFID.

Incluye el adaptador del almacén de registros (buscar, insertar si no existe,
actualizar si existe), el appender del log y las consultas de solo lectura que
usa el dashboard.
"""
import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import StoreUnavailable
from database.models import RfidRegistration, RfidLogEntry

logger = logging.getLogger("database.crud")

# ---------------------
# REGISTRATION STORE
# ---------------------

def find_registration(db: Session, tag_id: str) -> RfidRegistration | None:
    """Obtiene el registro de un tag por su `tag_id`, o None si no existe."""
    try:
        return db.query(RfidRegistration).filter_by(tag_id=tag_id).first()
    except SQLAlchemyError as e:
        logger.error(f"Error finding registration '{tag_id}': {e}")
        db.rollback()
        raise StoreUnavailable(f"Error reading registration {tag_id}") from e


def insert_registration_if_absent(
    db: Session,
    tag_id: str,
    status: bool
) -> tuple[RfidRegistration, bool]:
    """
    Crea el registro si el tag no existe.

    Devuelve `(registro, creado)`; si ya existía, `creado` es False y el
    registro es el existente. La restricción única cubre la carrera entre
    procesos.
    """
    existing = find_registration(db, tag_id)
    if existing:
        return existing, False
    reg = RfidRegistration(tag_id=tag_id, status=status)
    try:
        db.add(reg)
        db.commit()
        db.refresh(reg)
        return reg, True
    except IntegrityError:
        db.rollback()
        logger.info(f"Registration '{tag_id}' created concurrently")
        return find_registration(db, tag_id), False
    except SQLAlchemyError as e:
        logger.error(f"Error inserting registration '{tag_id}': {e}")
        db.rollback()
        raise StoreUnavailable(f"Error registering {tag_id}") from e


def update_registration_if_present(
    db: Session,
    tag_id: str,
    status: bool
) -> tuple[RfidRegistration, bool] | None:
    """
    Cambia el estado del tag si está registrado.

    Devuelve `(registro, estado_anterior)` o None si el tag no existe. La fila
    se lee con `FOR UPDATE` (ignorado por SQLite).
    """
    try:
        reg = (
            db.query(RfidRegistration)
              .filter_by(tag_id=tag_id)
              .with_for_update()
              .first()
        )
        if reg is None:
            db.rollback()
            return None
        previous = reg.status
        reg.status = status
        db.commit()
        db.refresh(reg)
        return reg, previous
    except SQLAlchemyError as e:
        logger.error(f"Error updating registration '{tag_id}': {e}")
        db.rollback()
        raise StoreUnavailable(f"Error updating status for {tag_id}") from e


# ---------------------
# LOG APPENDER
# ---------------------

def append_log(db: Session, tag_id: str, status: bool | None, timestamp: str) -> RfidLogEntry:
    """Inserta una entrada en `rfid_logs`; `status` None marca tag desconocido."""
    entry = RfidLogEntry(tag_id=tag_id, status=status, timestamp=timestamp)
    try:
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry
    except SQLAlchemyError as e:
        logger.error(f"Error appending log for '{tag_id}': {e}")
        db.rollback()
        raise StoreUnavailable(f"Error writing log for {tag_id}") from e


# ---------------------
# QUERY SERVICE
# ---------------------

def _read(db: Session, query, what: str):
    try:
        return query.all()
    except SQLAlchemyError as e:
        logger.error(f"Error listing {what}: {e}")
        db.rollback()
        raise StoreUnavailable(f"Error retrieving {what}") from e


def list_registrations(db: Session) -> list[RfidRegistration]:
    """Lista todos los registros, en orden de creación."""
    return _read(db, db.query(RfidRegistration).order_by(RfidRegistration.id), "registrations")


def list_registrations_by_status(db: Session, status: bool) -> list[RfidRegistration]:
    """Lista los registros activos (True) o inactivos (False)."""
    query = (
        db.query(RfidRegistration)
          .filter(RfidRegistration.status == status)
          .order_by(RfidRegistration.id)
    )
    return _read(db, query, "registrations")


def list_logs(db: Session) -> list[RfidLogEntry]:
    """Devuelve el log completo, más reciente primero (empates: último insertado)."""
    query = (
        db.query(RfidLogEntry)
          .order_by(RfidLogEntry.timestamp.desc(), RfidLogEntry.id.desc())
    )
    return _read(db, query, "logs")
