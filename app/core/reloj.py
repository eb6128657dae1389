from datetime import date, datetime, timedelta, timezone


class Reloj:
    """Proveedor de la hora actual (UTC). Todas las reglas lo reciben por parámetro."""

    def ahora(self) -> datetime:
        raise NotImplementedError

    def hoy(self) -> date:
        return self.ahora().date()


class RelojSistema(Reloj):
    def ahora(self) -> datetime:
        return datetime.now(timezone.utc)


class RelojFijo(Reloj):
    """Reloj detenido, para tests y simulaciones."""

    def __init__(self, instante: datetime):
        self.instante = _a_utc(instante)

    def ahora(self) -> datetime:
        return self.instante

    def fijar(self, instante: datetime) -> None:
        self.instante = _a_utc(instante)

    def avanzar(self, **delta) -> None:
        self.instante = self.instante + timedelta(**delta)


def _a_utc(instante: datetime) -> datetime:
    if instante.tzinfo is None:
        return instante.replace(tzinfo=timezone.utc)
    return instante.astimezone(timezone.utc)
