"""
Ensamblado del calendario mensual de un alumno y estadísticas del mes.

Sólo lectura: dos llamadas idénticas sin escrituras entre medias devuelven lo
mismo.
"""

import calendar
import logging
from collections import Counter
from datetime import date, timedelta
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.dias import dia_semana, es_dia_laborable, formatear_rango, nombre_dia
from app.core.errors import AlumnoNoEncontrado, EntradaInvalida
from app.core.reloj import Reloj
from app.repositories.alumno_repository import AlumnoRepository
from app.repositories.calendario_repository import CalendarioRepository
from app.schemas.calendario import CalendarioMes, ClaseDia, DiaCalendario, EstadisticasCalendario
from app.schemas.recuperacion import RecuperacionResponse
from app.services.base import operacion
from app.services.cancelacion_service import ANTELACION_CANCELACION, a_cancelacion_response
from app.services.capacidad_service import slots_con_plazas

logger = logging.getLogger(__name__)

ANIO_MIN = 2020
ANIO_MAX = 2030


def _validar_periodo(anio: int, mes: int) -> None:
    errores = []
    if not 1 <= mes <= 12:
        errores.append("mes: debe estar entre 1 y 12")
    if not ANIO_MIN <= anio <= ANIO_MAX:
        errores.append(f"anio: debe estar entre {ANIO_MIN} y {ANIO_MAX}")
    if errores:
        raise EntradaInvalida("Año o mes no válido", errores)


def _dias_del_mes(anio: int, mes: int) -> list[date]:
    total = calendar.monthrange(anio, mes)[1]
    return [date(anio, mes, dia) for dia in range(1, total + 1)]


def armar_calendario(db: Session, id_alumno: UUID, anio: int, mes: int, reloj: Reloj) -> CalendarioMes:
    _validar_periodo(anio, mes)

    if AlumnoRepository(db).obtener(id_alumno, solo_activos=True) is None:
        raise AlumnoNoEncontrado()

    dias = _dias_del_mes(anio, mes)
    primero, ultimo = dias[0], dias[-1]

    # Todo se carga de una vez; el bucle de días no consulta la base salvo para las franjas libres
    repo = CalendarioRepository(db)
    horarios = repo.horarios_del_alumno(id_alumno, solo_activos=True)
    cancelaciones = repo.cancelaciones_del_alumno(id_alumno, primero, ultimo)
    recuperaciones = repo.recuperaciones_del_alumno(id_alumno, primero, ultimo)
    originales = repo.horarios_por_id({c.id_horario_original for c in cancelaciones}, solo_activos=False)

    canceladas = {(c.fecha_clase, c.id_horario_original) for c in cancelaciones}
    hoy = reloj.hoy()
    limite_cancelacion = (reloj.ahora() + ANTELACION_CANCELACION).date()

    resultado = CalendarioMes(anio=anio, mes=mes)
    for fecha in dias:
        dia = dia_semana(fecha)
        clases = []
        for horario in horarios:
            if horario.dia_semana != dia:
                continue
            cancelada = (fecha, horario.id_horario) in canceladas
            clases.append(ClaseDia(
                id_horario=horario.id_horario,
                hora_inicio=horario.hora_inicio,
                hora_fin=horario.hora_fin,
                rango_horario=formatear_rango(horario.hora_inicio, horario.hora_fin),
                cancelada=cancelada,
                puede_cancelar=not cancelada and fecha > limite_cancelacion,
            ))

        disponible = es_dia_laborable(dia)
        slots = []
        if fecha > hoy and disponible and not clases:
            slots = slots_con_plazas(db, fecha)

        resultado.dias.append(DiaCalendario(
            fecha=fecha,
            clases=clases,
            clases_recuperacion=[
                RecuperacionResponse.model_validate(r) for r in recuperaciones if r.fecha_clase == fecha
            ],
            cancelaciones=[
                a_cancelacion_response(c, originales.get(c.id_horario_original))
                for c in cancelaciones if c.fecha_clase == fecha
            ],
            disponible=disponible,
            slots_disponibles=slots,
        ))

    return resultado


def calcular_estadisticas(db: Session, anio: int, mes: int) -> EstadisticasCalendario:
    _validar_periodo(anio, mes)

    dias = _dias_del_mes(anio, mes)
    primero, ultimo = dias[0], dias[-1]

    repo = CalendarioRepository(db)
    horarios_por_dia = Counter()
    franjas_por_horario = {}
    for horario in repo.horarios(solo_activos=True):
        horarios_por_dia[horario.dia_semana] += 1
        rango = formatear_rango(horario.hora_inicio, horario.hora_fin)
        franjas_por_horario.setdefault(horario.dia_semana, Counter())[rango] += 1

    capacidad_por_dia = Counter()
    for franja in repo.franjas(solo_activas=True):
        capacidad_por_dia[franja.dia_semana] += franja.capacidad_maxima

    clases_por_dia = Counter()
    clases_por_franja = Counter()
    capacidad_total = 0
    for fecha in dias:
        dia = dia_semana(fecha)
        capacidad_total += capacidad_por_dia[dia]
        if horarios_por_dia[dia]:
            clases_por_dia[nombre_dia(dia)] += horarios_por_dia[dia]
            clases_por_franja.update(franjas_por_horario[dia])

    total = sum(clases_por_dia.values())
    canceladas = repo.contar_cancelaciones_entre(primero, ultimo)
    recuperadas = repo.contar_recuperaciones_entre(primero, ultimo)

    tasa = 0.0
    if capacidad_total:
        tasa = round((total - canceladas + recuperadas) * 100 / capacidad_total, 2)

    return EstadisticasCalendario(
        anio=anio,
        mes=mes,
        total_clases=total,
        clases_canceladas=canceladas,
        clases_recuperacion=recuperadas,
        tasa_ocupacion=tasa,
        clases_por_dia=dict(clases_por_dia),
        clases_por_franja=dict(clases_por_franja),
    )


# ---------------------------------------------------------------------------
# Operaciones públicas
# ---------------------------------------------------------------------------

@operacion("Calendario obtenido correctamente")
def obtener_calendario_alumno(db: Session, id_alumno: UUID, anio: int, mes: int, reloj: Reloj) -> CalendarioMes:
    logger.info("Armando calendario %04d-%02d del alumno %s", anio, mes, id_alumno)
    return armar_calendario(db, id_alumno, anio, mes, reloj)


@operacion("Estadísticas obtenidas correctamente")
def obtener_estadisticas(db: Session, anio: int, mes: int) -> EstadisticasCalendario:
    logger.info("Calculando estadísticas de %04d-%02d", anio, mes)
    estadisticas = calcular_estadisticas(db, anio, mes)
    logger.info(
        "Estadísticas %04d-%02d: %d clases, %d canceladas, %d recuperaciones",
        anio, mes, estadisticas.total_clases, estadisticas.clases_canceladas, estadisticas.clases_recuperacion,
    )
    return estadisticas
