"""
Cálculo de ocupación y plazas libres.

ocupados(fecha, franja) = horarios regulares activos de ese día
                          - cancelaciones de esa fecha en la franja
                          + recuperaciones de esa fecha en la franja
"""

import logging
from datetime import date, time
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.dias import dia_semana, es_dia_laborable, formatear_rango
from app.core.errors import EntradaInvalida
from app.core.reloj import Reloj
from app.models.franja_horaria import CAPACIDAD_POR_DEFECTO
from app.repositories.calendario_repository import CalendarioRepository
from app.schemas.calendario import SlotDisponible
from app.services.base import operacion

logger = logging.getLogger(__name__)


def contar_ocupados(db: Session, fecha: date, hora_inicio: time, hora_fin: time) -> int:
    repo = CalendarioRepository(db)
    dia = dia_semana(fecha)

    regulares = repo.contar_horarios_en_franja(dia, hora_inicio, hora_fin, solo_activos=True)
    canceladas = repo.contar_cancelaciones_en_franja(fecha, hora_inicio, hora_fin)
    recuperaciones = repo.contar_recuperaciones_en_franja(fecha, hora_inicio, hora_fin)

    total = regulares - canceladas + recuperaciones
    logger.debug(
        "Ocupación %s %s: regulares=%d canceladas=%d recuperaciones=%d total=%d",
        fecha, formatear_rango(hora_inicio, hora_fin), regulares, canceladas, recuperaciones, total,
    )
    # Una cancelación puede apuntar a un horario cuya franja se editó después
    return max(0, total)


def slots_con_plazas(db: Session, fecha: date) -> list[SlotDisponible]:
    """Franjas activas del catálogo para el día de `fecha` con al menos una plaza libre."""
    repo = CalendarioRepository(db)
    slots = []
    for franja in repo.franjas_del_dia(dia_semana(fecha), solo_activas=True):
        libres = franja.capacidad_maxima - contar_ocupados(db, fecha, franja.hora_inicio, franja.hora_fin)
        if libres > 0:
            slots.append(SlotDisponible(
                hora_inicio=franja.hora_inicio,
                hora_fin=franja.hora_fin,
                rango_horario=formatear_rango(franja.hora_inicio, franja.hora_fin),
                plazas_disponibles=libres,
                plazas_totales=franja.capacidad_maxima,
            ))
    return slots


def slots_disponibles(db: Session, fecha: date, reloj: Reloj) -> list[SlotDisponible]:
    # Sólo se ofrecen fechas estrictamente futuras y de lunes a viernes
    if fecha <= reloj.hoy():
        return []
    if not es_dia_laborable(dia_semana(fecha)):
        return []
    return slots_con_plazas(db, fecha)


def capacidad_horario(db: Session, dia: int, hora_inicio: time, hora_fin: time) -> int:
    franja = CalendarioRepository(db).obtener_franja(dia, hora_inicio, hora_fin, solo_activas=True)
    return franja.capacidad_maxima if franja else CAPACIDAD_POR_DEFECTO


def validar_franja(dia: int, hora_inicio: time, hora_fin: time, campo: str = "horario") -> list[str]:
    errores = []
    if not 1 <= dia <= 7:
        errores.append(f"{campo}.dia_semana: debe estar entre 1 (lunes) y 7 (domingo)")
    if hora_inicio >= hora_fin:
        errores.append(f"{campo}.hora_fin: debe ser posterior a hora_inicio")
    return errores


def hay_capacidad_horario(
    db: Session,
    dia: int,
    hora_inicio: time,
    hora_fin: time,
    excluir_alumno_id: UUID | None = None,
) -> bool:
    errores = validar_franja(dia, hora_inicio, hora_fin)
    if errores:
        raise EntradaInvalida("Horario no válido", errores)

    ocupados = CalendarioRepository(db).contar_horarios_en_franja(
        dia, hora_inicio, hora_fin, solo_activos=True, excluir_alumno_id=excluir_alumno_id
    )
    capacidad = capacidad_horario(db, dia, hora_inicio, hora_fin)
    logger.debug(
        "Capacidad horario día=%d %s: %d/%d",
        dia, formatear_rango(hora_inicio, hora_fin), ocupados, capacidad,
    )
    return ocupados < capacidad


# ---------------------------------------------------------------------------
# Operaciones públicas
# ---------------------------------------------------------------------------

@operacion("Franjas disponibles obtenidas correctamente")
def obtener_slots_disponibles(db: Session, fecha: date, reloj: Reloj) -> list[SlotDisponible]:
    logger.info("Consultando franjas disponibles para %s", fecha)
    slots = slots_disponibles(db, fecha, reloj)
    logger.info("%d franjas disponibles para %s", len(slots), fecha)
    return slots


@operacion("Capacidad del horario comprobada")
def comprobar_capacidad_horario(
    db: Session,
    dia: int,
    hora_inicio: time,
    hora_fin: time,
    excluir_alumno_id: UUID | None = None,
) -> bool:
    return hay_capacidad_horario(db, dia, hora_inicio, hora_fin, excluir_alumno_id)
