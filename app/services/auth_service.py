import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import create_access_token
from app.repositories.alumno_repository import AlumnoRepository
from app.schemas.auth import LoginResponse
from app.services.alumno_service import DNI_ADMIN, a_alumno_response, normalizar_dni

logger = logging.getLogger(__name__)


def login(db: Session, dni: str) -> LoginResponse:
    dni = normalizar_dni(dni)

    if dni == DNI_ADMIN and settings.ADMIN_LOGIN_ENABLED:
        token, expira_en = create_access_token(dni=DNI_ADMIN, nombre="Administrador", es_admin=True)
        logger.info("Acceso de administración")
        return LoginResponse(token=token, expira_en=expira_en, es_admin=True)

    alumno = AlumnoRepository(db).obtener_por_dni(dni, solo_activos=True)
    if not alumno:
        logger.warning("Intento de acceso con DNI no registrado")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="DNI no registrado o alumno inactivo"
        )

    token, expira_en = create_access_token(
        dni=alumno.dni,
        nombre=alumno.nombre,
        es_admin=False,
        id_alumno=alumno.id_alumno,
    )
    logger.info("Acceso del alumno %s", alumno.id_alumno)
    return LoginResponse(
        token=token,
        expira_en=expira_en,
        es_admin=False,
        alumno=a_alumno_response(db, alumno),
    )
