"""
Reserva de clases de recuperación.

Cada cancelación da derecho a una única recuperación. Las comprobaciones de
`reservar_recuperacion` se evalúan en orden y la primera que falla decide el
error devuelto.
"""

import logging
from datetime import time
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dias import dia_semana, formatear_rango
from app.core.errors import (
    CancelacionNoEncontrada,
    ChoqueConHorarioRegular,
    EntradaInvalida,
    ErrorDominio,
    FechaNoFutura,
    FranjaCompleta,
    SinRecuperacionDisponible,
    YaRecuperada,
)
from app.core.reloj import Reloj
from app.models.cancelacion import Cancelacion
from app.models.clase_recuperacion import ClaseRecuperacion
from app.repositories.calendario_repository import CalendarioRepository
from app.schemas.cancelacion import CancelacionResponse
from app.schemas.recuperacion import RecuperacionCreate, RecuperacionResponse
from app.services.base import operacion
from app.services.cancelacion_service import a_cancelacion_response
from app.services.capacidad_service import capacidad_horario, contar_ocupados

logger = logging.getLogger(__name__)

# Techo fijo al reservar recuperaciones, independiente de la capacidad del catálogo
CAPACIDAD_RECUPERACION_FIJA = 10


def techo_recuperacion(db: Session, dia: int, hora_inicio: time, hora_fin: time) -> int:
    if settings.RECOVERY_CAPACITY_SOURCE == "catalog":
        return capacidad_horario(db, dia, hora_inicio, hora_fin)
    return CAPACIDAD_RECUPERACION_FIJA


def cancelaciones_sin_recuperar(db: Session, id_alumno: UUID) -> list[Cancelacion]:
    repo = CalendarioRepository(db)
    recuperadas = repo.ids_cancelaciones_recuperadas(id_alumno)
    return [
        cancelacion
        for cancelacion in repo.cancelaciones_del_alumno(id_alumno, recientes_primero=True)
        if cancelacion.id_cancelacion not in recuperadas
    ]


@operacion("Clases disponibles para recuperar obtenidas correctamente")
def obtener_recuperaciones_disponibles(db: Session, id_alumno: UUID) -> list[CancelacionResponse]:
    logger.info("Consultando recuperaciones disponibles del alumno %s", id_alumno)
    cancelaciones = cancelaciones_sin_recuperar(db, id_alumno)

    horarios = CalendarioRepository(db).horarios_por_id(
        {c.id_horario_original for c in cancelaciones}, solo_activos=False
    )
    logger.info("%d recuperaciones disponibles para el alumno %s", len(cancelaciones), id_alumno)
    return [a_cancelacion_response(c, horarios.get(c.id_horario_original)) for c in cancelaciones]


@operacion("Clase de recuperación reservada correctamente")
def reservar_recuperacion(db: Session, id_alumno: UUID, datos: RecuperacionCreate, reloj: Reloj) -> RecuperacionResponse:
    logger.info("Reservando recuperación para el alumno %s el %s", id_alumno, datos.fecha_clase)

    if datos.hora_inicio >= datos.hora_fin:
        raise EntradaInvalida("Franja horaria no válida", ["hora_fin: debe ser posterior a hora_inicio"])

    repo = CalendarioRepository(db)
    dia = dia_semana(datos.fecha_clase)
    try:
        # 1. Tiene que quedar alguna cancelación sin recuperar
        if not cancelaciones_sin_recuperar(db, id_alumno):
            raise SinRecuperacionDisponible()

        # 2. La cancelación es del alumno
        cancelacion = repo.obtener_cancelacion_del_alumno(datos.id_cancelacion_original, id_alumno)
        if cancelacion is None:
            raise CancelacionNoEncontrada()

        # 3. Relación 1:1 cancelación -> recuperación
        if repo.existe_recuperacion_para(cancelacion.id_cancelacion):
            raise YaRecuperada()

        # 4. Plazas. Se bloquea la franja del catálogo para serializar reservas concurrentes
        repo.obtener_franja(dia, datos.hora_inicio, datos.hora_fin, solo_activas=False, bloquear=True)
        techo = techo_recuperacion(db, dia, datos.hora_inicio, datos.hora_fin)
        if contar_ocupados(db, datos.fecha_clase, datos.hora_inicio, datos.hora_fin) >= techo:
            logger.warning(
                "Franja completa para recuperación el %s %s",
                datos.fecha_clase, formatear_rango(datos.hora_inicio, datos.hora_fin),
            )
            raise FranjaCompleta()

        # 5. Sólo fechas futuras
        if datos.fecha_clase <= reloj.hoy():
            raise FechaNoFutura()

        # 6. No puede coincidir con un día de clase regular del alumno
        if repo.horarios_del_alumno(id_alumno, solo_activos=True, dia=dia):
            raise ChoqueConHorarioRegular()
    except ErrorDominio:
        db.rollback()
        raise

    # 7. Alta
    recuperacion = ClaseRecuperacion(
        id_alumno=id_alumno,
        id_cancelacion_original=cancelacion.id_cancelacion,
        fecha_clase=datos.fecha_clase,
        hora_inicio=datos.hora_inicio,
        hora_fin=datos.hora_fin,
        reservado_en=reloj.ahora(),
    )
    try:
        repo.agregar(recuperacion)
        db.commit()
    except IntegrityError:
        db.rollback()
        if repo.existe_recuperacion_para(datos.id_cancelacion_original):
            raise YaRecuperada()
        raise
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(recuperacion)
    logger.info("Recuperación reservada para el alumno %s el %s", id_alumno, datos.fecha_clase)
    return RecuperacionResponse.model_validate(recuperacion)
