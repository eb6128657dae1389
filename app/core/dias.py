"""
Conversión de días de la semana.

El dominio numera los días 1=Lunes .. 7=Domingo. La plataforma (strftime "%w",
getDay() del frontend) usa 0=Domingo .. 6=Sábado. Toda fecha que deba
compararse con un Horario o una FranjaHoraria pasa por `dia_semana`.
"""

from datetime import date, time

LUNES = 1
VIERNES = 5
DOMINGO = 7

NOMBRES_DIAS = {
    1: "Lunes",
    2: "Martes",
    3: "Miércoles",
    4: "Jueves",
    5: "Viernes",
    6: "Sábado",
    7: "Domingo",
}


def desde_indice_domingo_cero(indice: int) -> int:
    """Convierte un día 0=Domingo..6=Sábado al 1=Lunes..7=Domingo del dominio."""
    if not 0 <= indice <= 6:
        raise ValueError(f"Índice de día fuera de rango: {indice}")
    # Domingo es 7, nunca 0
    return DOMINGO if indice == 0 else indice


def dia_semana(fecha: date) -> int:
    return desde_indice_domingo_cero(int(fecha.strftime("%w")))


def es_dia_laborable(dia: int) -> bool:
    return LUNES <= dia <= VIERNES


def nombre_dia(dia: int) -> str:
    return NOMBRES_DIAS.get(dia, "Día desconocido")


def formatear_rango(hora_inicio: time, hora_fin: time) -> str:
    return f"{hora_inicio:%H:%M}-{hora_fin:%H:%M}"
