"""
Gateway de publicación MQTT hacia el controlador de la puerta.

Envuelve un cliente `paho-mqtt` y mantiene el estado de conexión del proceso
(`disconnected -> connecting -> connected`, `error` desde cualquier estado).
`publish` nunca lanza excepciones y está acotado por un timeout; `dispatch`
lo ejecuta en un hilo de fondo y devuelve un `Future`.
"""
import logging
import ssl
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum

import paho.mqtt.client as mqtt

logger = logging.getLogger("core.mqtt_gateway")


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True)
class PublishOutcome:
    """Resultado de una publicación: `ok` o el motivo del fallo."""
    ok: bool
    payload: str
    error: str | None = None


def default_client_factory(client_id: str):
    return mqtt.Client(
        callback_api_version=mqtt.CallbackAPIVersion.VERSION1,
        client_id=client_id,
        protocol=mqtt.MQTTv311,
    )


class MqttGateway:
    """Publica mensajes de estado RFID en un único topic MQTT."""

    def __init__(
        self,
        host: str | None,
        port: int = 1883,
        topic: str = "rfid/status",
        username: str | None = None,
        password: str | None = None,
        secure: bool = False,
        client_id: str = "rfid-status-service",
        qos: int = 1,
        keepalive: int = 60,
        publish_timeout: float = 2.0,
        client_factory=default_client_factory,
    ):
        self.host = host
        self.port = port
        self.topic = topic
        self.username = username
        self.password = password
        self.secure = secure
        self.client_id = client_id
        self.qos = qos
        self.keepalive = keepalive
        self.publish_timeout = publish_timeout
        self._client_factory = client_factory
        self.client = None
        self._state = ConnectionState.DISCONNECTED
        self._last_error: str | None = None
        self._lock = threading.Lock()
        # un solo worker: las publicaciones salen en el orden en que se piden
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mqtt-publish")

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "MqttGateway":
        return cls(
            host=settings.MQTT_HOST,
            port=settings.MQTT_PORT,
            topic=settings.MQTT_TOPIC,
            username=settings.MQTT_USERNAME,
            password=settings.MQTT_PASSWORD,
            secure=settings.MQTT_SECURE,
            client_id=settings.MQTT_CLIENT_ID,
            qos=settings.MQTT_QOS,
            keepalive=settings.MQTT_KEEPALIVE,
            publish_timeout=settings.MQTT_PUBLISH_TIMEOUT,
            **kwargs,
        )

    # ---- estado

    @property
    def state(self) -> ConnectionState:
        with self._lock:
            return self._state

    def _set_state(self, state: ConnectionState, error: str | None = None) -> None:
        with self._lock:
            previous = self._state
            self._state = state
            if error is not None:
                self._last_error = error
        if previous != state:
            logger.info(f"MQTT state {previous.value} -> {state.value}")

    def status(self) -> dict:
        """Vista de solo lectura del estado de conexión para el dashboard."""
        with self._lock:
            return {
                "status": self._state.value,
                "host": self.host,
                "port": self.port,
                "topic": self.topic,
                "last_error": self._last_error,
            }

    # ---- callbacks paho (API v1)

    def on_pre_connect(self, client, userdata):
        self._set_state(ConnectionState.CONNECTING)

    def on_connect(self, client, userdata, flags, rc):
        if rc == 0:
            self._set_state(ConnectionState.CONNECTED)
            logger.info(f"Connected to MQTT broker {self.host}:{self.port}")
        else:
            reason = mqtt.connack_string(rc)
            self._set_state(ConnectionState.ERROR, reason)
            logger.error(f"Failed to connect to MQTT broker: {reason}")

    def on_connect_fail(self, client, userdata):
        self._set_state(ConnectionState.ERROR, "connect failed")
        logger.error(f"Could not reach MQTT broker {self.host}:{self.port}")

    def on_disconnect(self, client, userdata, rc):
        if rc == 0:
            self._set_state(ConnectionState.DISCONNECTED)
            logger.info("Disconnected from MQTT broker")
        else:
            self._set_state(ConnectionState.ERROR, f"unexpected disconnect rc={rc}")
            logger.warning(f"Unexpected MQTT disconnect (rc={rc}), paho will retry")

    # ---- ciclo de vida

    def start(self) -> None:
        """Inicia la conexión en segundo plano; sin host no hace nada."""
        if not self.host:
            logger.warning("MQTT_HOST not configured, publishing disabled")
            return
        client = self._client_factory(self.client_id)
        if self.username and self.password:
            client.username_pw_set(self.username, self.password)
        if self.secure:
            client.tls_set_context(ssl.create_default_context())
        client.on_pre_connect = self.on_pre_connect
        client.on_connect = self.on_connect
        client.on_connect_fail = self.on_connect_fail
        client.on_disconnect = self.on_disconnect
        self.client = client

        self._set_state(ConnectionState.CONNECTING)
        try:
            client.connect_async(self.host, self.port, self.keepalive)
            client.loop_start()
        except (OSError, ValueError) as e:
            self._set_state(ConnectionState.ERROR, str(e))
            logger.error(f"Error starting MQTT client: {e}")

    def stop(self) -> None:
        if self.client is not None:
            try:
                self.client.disconnect()
                self.client.loop_stop()
            except (OSError, RuntimeError) as e:
                logger.warning(f"Error stopping MQTT client: {e}")
            self.client = None
        self._executor.shutdown(wait=False)
        self._set_state(ConnectionState.DISCONNECTED)

    # ---- publicación

    def publish(self, payload: str) -> PublishOutcome:
        """Publica `payload` y espera el ack como máximo `publish_timeout`."""
        if self.client is None or self.state != ConnectionState.CONNECTED:
            logger.warning(f"MQTT not connected, dropping payload {payload!r}")
            return PublishOutcome(False, payload, "not_connected")
        try:
            info = self.client.publish(self.topic, payload, qos=self.qos)
            if info.rc != mqtt.MQTT_ERR_SUCCESS:
                error = mqtt.error_string(info.rc)
                logger.warning(f"MQTT publish of {payload!r} rejected: {error}")
                return PublishOutcome(False, payload, error)
            info.wait_for_publish(timeout=self.publish_timeout)
        except (RuntimeError, ValueError, OSError) as e:
            logger.warning(f"MQTT publish of {payload!r} failed: {e}")
            return PublishOutcome(False, payload, str(e))
        if not info.is_published():
            logger.warning(f"MQTT publish of {payload!r} timed out after {self.publish_timeout}s")
            return PublishOutcome(False, payload, "timeout")
        logger.info(f"Published {payload!r} to {self.topic}")
        return PublishOutcome(True, payload)

    def dispatch(self, payload: str) -> Future:
        """Encola `publish(payload)` en el worker de fondo."""
        return self._executor.submit(self.publish, payload)
