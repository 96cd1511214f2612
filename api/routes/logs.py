"""
Rutas del log RFID y de la publicación MQTT de diagnóstico.

Prefijo: `/logs`.
"""
# api/routes/logs.py

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import get_db, get_gateway
from api.schemas.rfid import DiagnosticPublishIn, LogEntryOut
from core.errors import ValidationFailed
from core.mqtt_gateway import MqttGateway
from database import crud

logger = logging.getLogger("api.routes.logs")

router = APIRouter(prefix="/logs", tags=["Logs"])


@router.get("")
def list_logs(db: Session = Depends(get_db)):
    """Devuelve todas las entradas del log, la más reciente primero."""
    entries = crud.list_logs(db)
    return {
        "success": True,
        "count": len(entries),
        "data": [LogEntryOut.model_validate(e).model_dump(mode="json") for e in entries],
    }


@router.post("/test-publish")
def publish_test_message(
    data: DiagnosticPublishIn,
    gateway: MqttGateway = Depends(get_gateway)
):
    """Reenvía `message` tal cual al broker; no pasa por el reconciliador."""
    if data.message is None:
        raise ValidationFailed("message parameter is required", reason="missing_message")
    logger.info(f"Diagnostic MQTT publish requested: {data.message!r}")
    outcome = gateway.publish(data.message)
    if outcome.ok:
        return {"success": True, "message": "MQTT test message sent"}
    return {
        "success": False,
        "message": "MQTT test message failed",
        "error": outcome.error,
    }
