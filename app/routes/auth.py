from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.dependencies.auth import get_usuario_actual
from app.dependencies.db import get_db
from app.routes.respuestas import responder
from app.schemas.auth import LoginRequest, LoginResponse, UsuarioActual
from app.services import alumno_service
from app.services.auth_service import login as login_alumno

router = APIRouter(
    prefix="/auth",
    tags=["Auth"]
)

@router.post("/login", response_model=LoginResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db)
):
    return login_alumno(db=db, dni=data.dni)

@router.post("/validate-dni")
def validate_dni(
    data: LoginRequest,
    db: Session = Depends(get_db)
):
    """Indica si hay un alumno activo con ese DNI"""
    return responder(alumno_service.validar_dni(db, data.dni))

@router.get("/me", response_model=UsuarioActual)
def obtener_usuario_actual(
    usuario: UsuarioActual = Depends(get_usuario_actual)
):
    return usuario

@router.post("/logout", status_code=status.HTTP_200_OK)
def logout(
    usuario: UsuarioActual = Depends(get_usuario_actual)
):
    # Los tokens no se revocan en el servidor; el cliente descarta el suyo
    return {"success": True}
