import logging
from datetime import date, datetime, time, timedelta, timezone
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.dias import dia_semana
from app.core.errors import HorarioNoEncontrado, NoCancelable, YaCancelada
from app.core.reloj import Reloj
from app.models.cancelacion import Cancelacion
from app.models.horario import Horario
from app.repositories.calendario_repository import CalendarioRepository
from app.schemas.cancelacion import CancelacionCreate, CancelacionResponse
from app.schemas.horario import HorarioResponse
from app.services.base import operacion

logger = logging.getLogger(__name__)

# Antelación mínima para cancelar, contada desde las 00:00 UTC del día de la clase
ANTELACION_CANCELACION = timedelta(hours=24)


def inicio_del_dia_utc(fecha: date) -> datetime:
    return datetime.combine(fecha, time.min, tzinfo=timezone.utc)


def a_cancelacion_response(cancelacion: Cancelacion, horario: Horario | None = None) -> CancelacionResponse:
    respuesta = CancelacionResponse.model_validate(cancelacion)
    if horario is not None:
        respuesta.horario_original = HorarioResponse.model_validate(horario)
    return respuesta


def evaluar_cancelacion(db: Session, id_alumno: UUID, fecha_clase: date, reloj: Reloj) -> bool:
    """Regla de cancelación. Sólo lectura; ante cualquier duda devuelve False."""
    if inicio_del_dia_utc(fecha_clase) - reloj.ahora() < ANTELACION_CANCELACION:
        logger.debug("No se puede cancelar %s: menos de 24 horas de antelación", fecha_clase)
        return False

    repo = CalendarioRepository(db)
    if not repo.horarios_del_alumno(id_alumno, solo_activos=True, dia=dia_semana(fecha_clase)):
        logger.debug("No se puede cancelar %s: el alumno %s no tiene clase ese día", fecha_clase, id_alumno)
        return False

    if repo.existe_cancelacion(id_alumno, fecha_clase):
        logger.debug("No se puede cancelar %s: ya cancelada", fecha_clase)
        return False

    return True


@operacion("Consulta de cancelación realizada")
def puede_cancelar(db: Session, id_alumno: UUID, fecha_clase: date, reloj: Reloj) -> bool:
    logger.info("Comprobando si el alumno %s puede cancelar la clase del %s", id_alumno, fecha_clase)
    return evaluar_cancelacion(db, id_alumno, fecha_clase, reloj)


@operacion("Clase cancelada correctamente")
def cancelar_clase(db: Session, id_alumno: UUID, datos: CancelacionCreate, reloj: Reloj) -> CancelacionResponse:
    logger.info("Cancelando clase del alumno %s el %s", id_alumno, datos.fecha_clase)

    repo = CalendarioRepository(db)

    # Un duplicado es siempre un conflicto, aunque también incumpla la regla
    if repo.existe_cancelacion(id_alumno, datos.fecha_clase):
        raise YaCancelada()

    # 1. La regla se vuelve a evaluar; la restricción única cubre la carrera entre comprobar y escribir
    if not evaluar_cancelacion(db, id_alumno, datos.fecha_clase, reloj):
        raise NoCancelable()

    # 2. El horario tiene que ser del alumno, estar activo y caer en el día de la clase
    horario = repo.obtener_horario_del_alumno(
        datos.id_horario_original, id_alumno, solo_activos=True, dia=dia_semana(datos.fecha_clase)
    )
    if horario is None:
        logger.warning("Horario %s no encontrado para el alumno %s", datos.id_horario_original, id_alumno)
        raise HorarioNoEncontrado()

    # 3. Alta en una única transacción
    motivo = datos.motivo.strip() if datos.motivo else None
    cancelacion = Cancelacion(
        id_alumno=id_alumno,
        id_horario_original=horario.id_horario,
        fecha_clase=datos.fecha_clase,
        motivo=motivo or None,
        cancelado_en=reloj.ahora(),
    )
    try:
        repo.agregar(cancelacion)
        db.commit()
    except IntegrityError:
        db.rollback()
        if repo.existe_cancelacion(id_alumno, datos.fecha_clase):
            raise YaCancelada()
        raise
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(cancelacion)
    logger.info("Clase del %s cancelada para el alumno %s", datos.fecha_clase, id_alumno)
    return a_cancelacion_response(cancelacion, horario)
