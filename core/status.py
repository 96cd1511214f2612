"""
Estado de un tag RFID tal como lo ven el log y el bus MQTT.

`TagStatus.UNKNOWN` representa "tag visto pero no registrado"; en BD se guarda
como NULL y hacia el gateway se publica como "-1".
"""
from enum import Enum

from core.errors import ValidationFailed


class TagStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    UNKNOWN = "unknown"

    @classmethod
    def from_bool(cls, value: bool | None) -> "TagStatus":
        """Traduce el valor de columna (True/False/NULL) al estado."""
        if value is None:
            return cls.UNKNOWN
        return cls.ACTIVE if value else cls.INACTIVE

    @property
    def column_value(self) -> bool | None:
        if self is TagStatus.UNKNOWN:
            return None
        return self is TagStatus.ACTIVE

    @property
    def payload(self) -> str:
        """Mensaje MQTT para el controlador de la puerta."""
        return _PAYLOADS[self]


_PAYLOADS = {
    TagStatus.ACTIVE: "1",
    TagStatus.INACTIVE: "0",
    TagStatus.UNKNOWN: "-1",
}


def coerce_status(value) -> bool:
    """
    Convierte el `status` de una petición a booleano.

    Acepta bool, "true"/"false" (sin distinguir mayúsculas) y 1/0. `None`
    produce `missing_status`; cualquier otro valor, `invalid_status`.
    """
    if value is None:
        raise ValidationFailed("status parameter is required", reason="missing_status")
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
    elif isinstance(value, str):
        text = value.strip().lower()
        if text == "true":
            return True
        if text == "false":
            return False
    raise ValidationFailed(f"invalid status value: {value!r}", reason="invalid_status")


def require_tag_id(tag_id) -> str:
    """Valida que `tag_id` sea un texto no vacío y lo devuelve tal cual."""
    if not isinstance(tag_id, str) or not tag_id.strip():
        raise ValidationFailed("tag_id parameter is required", reason="missing_tag_id")
    return tag_id
