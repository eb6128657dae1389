"""
Errores de dominio del motor de calendario.

Cada error lleva un tipo (InvalidInput, NotFound, Conflict,
BusinessRuleViolation, StoreFailure), un código estable y un mensaje legible.
Las operaciones del motor los convierten en una RespuestaApi fallida; nunca
salen del motor como excepción.
"""

from enum import Enum

from fastapi import status


class TipoError(str, Enum):
    INVALID_INPUT = "InvalidInput"
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    BUSINESS_RULE = "BusinessRuleViolation"
    STORE_FAILURE = "StoreFailure"


HTTP_STATUS_POR_TIPO = {
    TipoError.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    TipoError.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    TipoError.CONFLICT: status.HTTP_409_CONFLICT,
    TipoError.BUSINESS_RULE: status.HTTP_400_BAD_REQUEST,
    TipoError.STORE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ErrorDominio(Exception):
    tipo = TipoError.STORE_FAILURE
    codigo = "StoreFailure"
    mensaje = "Error interno"

    def __init__(self, mensaje: str | None = None, errores: list[str] | None = None):
        self.mensaje = mensaje or self.mensaje
        self.errores = errores or []
        super().__init__(self.mensaje)

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_POR_TIPO[self.tipo]


class EntradaInvalida(ErrorDominio):
    tipo = TipoError.INVALID_INPUT
    codigo = "InvalidInput"
    mensaje = "Datos de entrada no válidos"


class NoEncontrado(ErrorDominio):
    tipo = TipoError.NOT_FOUND
    codigo = "NotFound"
    mensaje = "Recurso no encontrado"


class Conflicto(ErrorDominio):
    tipo = TipoError.CONFLICT
    codigo = "Conflict"
    mensaje = "Conflicto con el estado actual"


class ReglaNegocio(ErrorDominio):
    tipo = TipoError.BUSINESS_RULE
    codigo = "BusinessRuleViolation"
    mensaje = "Operación no permitida"


# ---------------------------------------------------------------------------
# NotFound
# ---------------------------------------------------------------------------

class AlumnoNoEncontrado(NoEncontrado):
    codigo = "StudentNotFound"
    mensaje = "Alumno no encontrado"


class HorarioNoEncontrado(NoEncontrado):
    codigo = "ScheduleNotFound"
    mensaje = "Horario no encontrado"


class CancelacionNoEncontrada(NoEncontrado):
    codigo = "CancellationNotFound"
    mensaje = "Cancelación original no encontrada"


# ---------------------------------------------------------------------------
# Conflict
# ---------------------------------------------------------------------------

class YaCancelada(Conflicto):
    codigo = "AlreadyCancelled"
    mensaje = "La clase de esa fecha ya está cancelada"


class YaRecuperada(Conflicto):
    codigo = "AlreadyRecovered"
    mensaje = "Ya existe una clase de recuperación para esta cancelación"


class FranjaCompleta(Conflicto):
    codigo = "SlotFull"
    mensaje = "La franja horaria está completa"


class HorarioCompleto(Conflicto):
    codigo = "ScheduleFull"
    mensaje = "El horario está completo"


class DniDuplicado(Conflicto):
    codigo = "DuplicateDni"
    mensaje = "Ya existe un alumno con este DNI"


# ---------------------------------------------------------------------------
# BusinessRuleViolation
# ---------------------------------------------------------------------------

class NoCancelable(ReglaNegocio):
    codigo = "NotCancellable"
    mensaje = "No se puede cancelar esta clase"


class SinRecuperacionDisponible(ReglaNegocio):
    codigo = "NoAvailableRecovery"
    mensaje = "No hay clases disponibles para recuperar"


class FechaNoFutura(ReglaNegocio):
    codigo = "DateNotFuture"
    mensaje = "La clase de recuperación debe reservarse para una fecha futura"


class ChoqueConHorarioRegular(ReglaNegocio):
    codigo = "ConflictsWithRegularSchedule"
    mensaje = "No se puede reservar una recuperación en tu día de clase habitual"
