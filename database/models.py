"""
Modelos ORM de la base de datos del servicio RFID.

Incluye el registro vigente de cada tag y el log de transiciones de estado.
"""
from sqlalchemy import Column, Integer, String, DateTime, Boolean
from datetime import datetime

from database.db import Base


class RfidRegistration(Base):
    """Estado vigente de un tag RFID, identificado por `tag_id`."""
    __tablename__ = "rfid_registrations"

    id = Column(Integer, primary_key=True)
    tag_id = Column(String(100), nullable=False, unique=True, index=True)
    status = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<RfidRegistration tag_id={self.tag_id!r} status={self.status}>"


class RfidLogEntry(Base):
    """
    Entrada inmutable del log de estados.

    `status` NULL significa que el tag no estaba registrado cuando se recibió
    el evento; no hay FK contra `rfid_registrations`.
    """
    __tablename__ = "rfid_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tag_id = Column(String(100), nullable=False, index=True)
    status = Column(Boolean, nullable=True)
    timestamp = Column(String(19), nullable=False, index=True)

    def __repr__(self):
        return f"<RfidLogEntry tag_id={self.tag_id!r} status={self.status} at {self.timestamp}>"
