from pydantic import BaseModel, Field
from datetime import date, datetime
from uuid import UUID

from app.schemas.horario import HorarioResponse


class CancelacionCreate(BaseModel):
    """Esquema de entrada para cancelar una clase concreta"""
    fecha_clase: date
    id_horario_original: UUID
    motivo: str | None = Field(None, max_length=500)

    class Config:
        json_schema_extra = {
            "example": {
                "fecha_clase": "2025-03-17",
                "id_horario_original": "uuid-del-horario",
                "motivo": "Cita médica"
            }
        }


class CancelacionResponse(BaseModel):
    id_cancelacion: UUID
    id_alumno: UUID
    fecha_clase: date
    id_horario_original: UUID
    cancelado_en: datetime
    motivo: str | None = None
    horario_original: HorarioResponse | None = None

    class Config:
        from_attributes = True
