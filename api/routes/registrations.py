"""
Rutas para registrar tags RFID, listarlos y cambiar su estado.

Prefijo: `/registrations`. El cambio de estado pasa por el `StatusReconciler`;
las lecturas van directo a `crud`.
"""
# api/routes/registrations.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_reconciler
from api.schemas.rfid import RegistrationIn, StatusChangeIn, RegistrationOut, LogEntryOut
from core.reconciler import StatusReconciler, NOT_FOUND
from core.status import coerce_status
from database import crud

router = APIRouter(prefix="/registrations", tags=["Registrations"])


def _registration(reg) -> dict | None:
    return RegistrationOut.model_validate(reg).model_dump(mode="json") if reg is not None else None


def _log(entry) -> dict | None:
    return LogEntryOut.model_validate(entry).model_dump(mode="json") if entry is not None else None


@router.post("", status_code=201)
def create_registration(
    data: RegistrationIn,
    reconciler: StatusReconciler = Depends(get_reconciler)
):
    """Registra un tag nuevo y crea su log inicial (no publica por MQTT)."""
    initial = True if data.status is None else data.status
    result = reconciler.register(data.tag_id, initial)
    return {
        "success": True,
        "message": "RFID registered successfully",
        "data": {
            "registration": _registration(result.registration),
            "log": _log(result.log),
        },
        "warnings": result.warnings,
    }


@router.get("")
def list_registrations(
    status: str | None = Query(None, description="true/false para filtrar por estado"),
    db: Session = Depends(get_db)
):
    """Lista todos los tags registrados, o solo los de un estado."""
    if status is None:
        regs = crud.list_registrations(db)
    else:
        regs = crud.list_registrations_by_status(db, coerce_status(status))
    return {
        "success": True,
        "count": len(regs),
        "data": [_registration(r) for r in regs],
    }


@router.put("/status")
def update_status(
    data: StatusChangeIn,
    reconciler: StatusReconciler = Depends(get_reconciler)
):
    """Cambia el estado de un tag; un tag desconocido se loguea y publica "-1"."""
    result = reconciler.reconcile(data.tag_id, data.status)
    if result.outcome == NOT_FOUND:
        message = "RFID not found"
    else:
        message = "RFID status updated successfully"
    return {
        "success": True,
        "outcome": result.outcome,
        "message": message,
        "data": {
            "tag_id": result.tag_id,
            "registration": _registration(result.registration),
            "previous_status": result.previous_status,
            "status": result.new_status.column_value,
            "log": _log(result.log),
            "published": result.published,
        },
        "warnings": result.warnings,
    }
