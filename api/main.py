# api/main.py
"""
Construcción de la aplicación FastAPI del servicio RFID.

El lifespan crea las tablas, arranca el gateway MQTT y deja el reconciliador
en `app.state`; al apagar, cierra la conexión MQTT.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.routes import logs, mqtt, registrations
from config.settings import settings
from core.clock import ReportingClock
from core.mqtt_gateway import MqttGateway
from core.reconciler import StatusReconciler
from database.db import SessionLocal, init_db

logger = logging.getLogger("api.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    gateway = MqttGateway.from_settings(settings)
    gateway.start()
    app.state.gateway = gateway
    app.state.reconciler = StatusReconciler(
        SessionLocal,
        gateway,
        clock=ReportingClock(settings.REPORT_UTC_OFFSET_HOURS),
        publish_timeout=settings.MQTT_PUBLISH_TIMEOUT,
    )
    logger.info("RFID status service started")
    yield
    gateway.stop()
    logger.info("RFID status service stopped")


def create_app() -> FastAPI:
    app = FastAPI(title="RFID Status API", version="1.0", lifespan=lifespan)

    # 1) CORS: el dashboard consulta desde otro origen
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 2) Errores de dominio -> sobre JSON
    register_exception_handlers(app)

    # 3) Routers REST
    app.include_router(registrations.router)
    app.include_router(logs.router)
    app.include_router(mqtt.router)

    # Health
    @app.get("/")
    def root():
        return {"message": "RFID status API activa"}

    return app


app = create_app()
