from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from app.schemas.horario import HorarioCreate, HorarioResponse


class AlumnoCreate(BaseModel):
    """Schema para crear un nuevo alumno con sus horarios"""
    nombre: str = Field(..., max_length=255)
    dni: str = Field(..., max_length=20, description="8 dígitos y letra de control")
    email: Optional[EmailStr] = None
    telefono: Optional[str] = Field(None, max_length=20)
    horarios: List[HorarioCreate] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "nombre": "María García López",
                "dni": "12345678Z",
                "email": "maria.garcia@example.com",
                "telefono": "666123456",
                "horarios": [
                    {"dia_semana": 1, "hora_inicio": "12:00", "hora_fin": "14:00"}
                ]
            }
        }


class AlumnoUpdate(BaseModel):
    """Schema para actualizar un alumno. Si se envían horarios, reemplazan a los actuales"""
    nombre: str = Field(..., max_length=255)
    email: Optional[EmailStr] = None
    telefono: Optional[str] = Field(None, max_length=20)
    activo: Optional[bool] = Field(None, description="Si se omite se conserva el estado actual")
    horarios: Optional[List[HorarioCreate]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "nombre": "María García López",
                "email": "maria.garcia@example.com",
                "telefono": "666123456",
                "activo": True
            }
        }


class AlumnoResponse(BaseModel):
    id_alumno: UUID
    nombre: str
    dni: str
    email: Optional[str] = None
    telefono: Optional[str] = None
    activo: bool
    created_at: Optional[datetime] = None
    horarios: List[HorarioResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True
