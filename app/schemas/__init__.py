from app.schemas.respuesta import RespuestaApi
from app.schemas.horario import (
    HorarioCreate,
    HorarioResponse
)
from app.schemas.alumno import (
    AlumnoCreate,
    AlumnoUpdate,
    AlumnoResponse
)
from app.schemas.cancelacion import (
    CancelacionCreate,
    CancelacionResponse
)
from app.schemas.recuperacion import (
    RecuperacionCreate,
    RecuperacionResponse
)
from app.schemas.calendario import (
    ClaseDia,
    SlotDisponible,
    DiaCalendario,
    CalendarioMes,
    EstadisticasCalendario
)
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    UsuarioActual
)

__all__ = [
    "RespuestaApi",
    # Horario schemas
    "HorarioCreate",
    "HorarioResponse",
    # Alumno schemas
    "AlumnoCreate",
    "AlumnoUpdate",
    "AlumnoResponse",
    # Cancelacion schemas
    "CancelacionCreate",
    "CancelacionResponse",
    # Recuperacion schemas
    "RecuperacionCreate",
    "RecuperacionResponse",
    # Calendario schemas
    "ClaseDia",
    "SlotDisponible",
    "DiaCalendario",
    "CalendarioMes",
    "EstadisticasCalendario",
    # Auth schemas
    "LoginRequest",
    "LoginResponse",
    "UsuarioActual",
]
