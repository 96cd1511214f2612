"""
Esquemas Pydantic para registros RFID, logs y publicaciones de prueba.
"""
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from datetime import datetime

# `rfid_data` se acepta como alias de entrada de `tag_id`

class RegistrationIn(BaseModel):
    """Entrada para registrar un tag; `status` es activo si no se indica."""
    tag_id: Optional[str] = Field(None, validation_alias=AliasChoices("tag_id", "rfid_data"))
    status: Any = True

class StatusChangeIn(BaseModel):
    """Entrada para cambiar el estado de un tag (bool, "true"/"false" o 1/0)."""
    tag_id: Optional[str] = Field(None, validation_alias=AliasChoices("tag_id", "rfid_data"))
    status: Any = None

class DiagnosticPublishIn(BaseModel):
    """Mensaje arbitrario para probar la conexión MQTT."""
    message: Optional[str] = None

class RegistrationOut(BaseModel):
    """Estado vigente de un tag."""
    tag_id: str
    status: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class LogEntryOut(BaseModel):
    """Entrada del log; `status` null indica tag no registrado."""
    id: int
    tag_id: str
    status: Optional[bool] = None
    timestamp: str

    model_config = ConfigDict(from_attributes=True)
