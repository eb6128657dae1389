from pydantic import BaseModel, Field
from datetime import date, time
from typing import Dict, List
from uuid import UUID

from app.schemas.cancelacion import CancelacionResponse
from app.schemas.recuperacion import RecuperacionResponse


class ClaseDia(BaseModel):
    """Clase regular de un alumno en un día concreto"""
    id_horario: UUID
    hora_inicio: time
    hora_fin: time
    rango_horario: str
    cancelada: bool
    puede_cancelar: bool


class SlotDisponible(BaseModel):
    hora_inicio: time
    hora_fin: time
    rango_horario: str
    plazas_disponibles: int
    plazas_totales: int


class DiaCalendario(BaseModel):
    fecha: date
    clases: List[ClaseDia] = Field(default_factory=list)
    clases_recuperacion: List[RecuperacionResponse] = Field(default_factory=list)
    cancelaciones: List[CancelacionResponse] = Field(default_factory=list)
    disponible: bool
    slots_disponibles: List[SlotDisponible] = Field(default_factory=list)


class CalendarioMes(BaseModel):
    anio: int
    mes: int
    dias: List[DiaCalendario] = Field(default_factory=list)


class EstadisticasCalendario(BaseModel):
    """Resumen mensual de ocupación (solo administradores)"""
    anio: int
    mes: int
    total_clases: int = 0
    clases_canceladas: int = 0
    clases_recuperacion: int = 0
    tasa_ocupacion: float = 0.0
    clases_por_dia: Dict[str, int] = Field(default_factory=dict)
    clases_por_franja: Dict[str, int] = Field(default_factory=dict)
