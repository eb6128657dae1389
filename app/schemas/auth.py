from pydantic import BaseModel, Field
from datetime import datetime

from app.schemas.alumno import AlumnoResponse


class LoginRequest(BaseModel):
    """Los alumnos se identifican con su DNI; "ADMIN" para administración"""
    dni: str = Field(..., max_length=20)


class LoginResponse(BaseModel):
    token: str
    expira_en: datetime
    es_admin: bool
    alumno: AlumnoResponse | None = None


class UsuarioActual(BaseModel):
    dni: str
    nombre: str
    es_admin: bool = False
    id_alumno: str | None = None
