"""
Dependencias de FastAPI compartidas por las rutas.

El reconciliador y el gateway MQTT viven en `app.state` (los crea el lifespan
de `api/main.py`); los handlers nunca tocan el estado global directamente.
"""
from fastapi import Request

from core.mqtt_gateway import MqttGateway
from core.reconciler import StatusReconciler
from database.db import get_db  # noqa: F401  (re-export)


def get_reconciler(request: Request) -> StatusReconciler:
    return request.app.state.reconciler


def get_gateway(request: Request) -> MqttGateway:
    return request.app.state.gateway
