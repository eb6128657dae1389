from pydantic import BaseModel, computed_field
from datetime import datetime, time
from uuid import UUID

from app.core.dias import formatear_rango, nombre_dia


class HorarioCreate(BaseModel):
    """Esquema para crear un horario semanal (1=Lunes .. 7=Domingo)"""
    dia_semana: int
    hora_inicio: time
    hora_fin: time

    class Config:
        json_schema_extra = {
            "example": {
                "dia_semana": 1,
                "hora_inicio": "12:00",
                "hora_fin": "14:00"
            }
        }


class HorarioResponse(BaseModel):
    id_horario: UUID
    id_alumno: UUID
    dia_semana: int
    hora_inicio: time
    hora_fin: time
    activo: bool
    created_at: datetime | None = None

    @computed_field
    @property
    def nombre_dia(self) -> str:
        return nombre_dia(self.dia_semana)

    @computed_field
    @property
    def rango_horario(self) -> str:
        return formatear_rango(self.hora_inicio, self.hora_fin)

    class Config:
        from_attributes = True
