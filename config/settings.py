"""
Carga de configuración desde variables de entorno usando Pydantic.

Lee `.env` en desarrollo para poblar la URL de base de datos, los datos del
broker MQTT y el huso horario con el que se reportan los logs RFID.
"""
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Esquema de variables de entorno usadas por el servicio."""
    # Base de datos (en producción apunta a Postgres)
    DATABASE_URL: str = "sqlite:///./rfid.db"

    # Broker MQTT; sin MQTT_HOST el gateway queda en `disconnected`
    MQTT_HOST: str | None = None
    MQTT_PORT: int = 1883
    MQTT_USERNAME: str | None = None
    MQTT_PASSWORD: str | None = None
    MQTT_SECURE: bool = False
    MQTT_TOPIC: str = "rfid/status"
    MQTT_CLIENT_ID: str = "rfid-status-service"
    MQTT_QOS: int = 1
    MQTT_KEEPALIVE: int = 60
    MQTT_PUBLISH_TIMEOUT: float = 2.0

    # Offset fijo (horas) con el que se escriben los timestamps de los logs
    REPORT_UTC_OFFSET_HOURS: int = 8

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]
    PORT: int = 8000

    class Config:
        env_file = ".env"

settings = Settings()
