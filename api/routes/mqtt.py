"""
Estado de la conexión MQTT para el indicador del dashboard.

Prefijo: `/mqtt`.
"""
# api/routes/mqtt.py

from fastapi import APIRouter, Depends

from api.deps import get_gateway
from core.mqtt_gateway import MqttGateway

router = APIRouter(prefix="/mqtt", tags=["MQTT"])


@router.get("/status")
def mqtt_status(gateway: MqttGateway = Depends(get_gateway)):
    """Devuelve `connected`, `connecting`, `error` o `disconnected`."""
    return {"success": True, "status": gateway.status()}
