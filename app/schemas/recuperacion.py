from pydantic import BaseModel, computed_field
from datetime import date, datetime, time
from uuid import UUID

from app.core.dias import formatear_rango


class RecuperacionCreate(BaseModel):
    """Esquema de entrada para reservar una clase de recuperación"""
    fecha_clase: date
    hora_inicio: time
    hora_fin: time
    id_cancelacion_original: UUID

    class Config:
        json_schema_extra = {
            "example": {
                "fecha_clase": "2025-03-19",
                "hora_inicio": "16:00",
                "hora_fin": "18:00",
                "id_cancelacion_original": "uuid-de-la-cancelacion"
            }
        }


class RecuperacionResponse(BaseModel):
    id_recuperacion: UUID
    id_alumno: UUID
    fecha_clase: date
    hora_inicio: time
    hora_fin: time
    id_cancelacion_original: UUID
    reservado_en: datetime

    @computed_field
    @property
    def rango_horario(self) -> str:
        return formatear_rango(self.hora_inicio, self.hora_fin)

    class Config:
        from_attributes = True
