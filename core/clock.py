"""
Normalización de timestamps para el log RFID.

Todos los logs guardan la hora como texto `YYYY-MM-DD HH:MM:SS` en un offset
fijo (UTC+8 por defecto), sin importar el huso horario del host.
"""
from datetime import datetime, timedelta, timezone

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def reporting_timezone(offset_hours: int = 8) -> timezone:
    return timezone(timedelta(hours=offset_hours))


def format_timestamp(moment: datetime, offset_hours: int = 8) -> str:
    """
    Convierte `moment` al offset de reporte y lo formatea a segundos.

    Un `datetime` naive se interpreta como UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    local = moment.astimezone(reporting_timezone(offset_hours))
    return local.strftime(TIMESTAMP_FORMAT)


class ReportingClock:
    """Reloj que entrega el timestamp canónico "ahora" para los logs."""

    def __init__(self, offset_hours: int = 8, now=None):
        self.offset_hours = offset_hours
        # `now` inyectable para tests; debe devolver un datetime aware
        self._now = now or (lambda: datetime.now(timezone.utc))

    def now(self) -> str:
        return format_timestamp(self._now(), self.offset_hours)

    __call__ = now
