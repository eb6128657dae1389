from datetime import time
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.dependencies.auth import get_usuario_actual, requiere_admin, verificar_acceso_alumno
from app.dependencies.db import get_db
from app.routes.respuestas import responder
from app.schemas.alumno import AlumnoCreate, AlumnoUpdate
from app.schemas.auth import UsuarioActual
from app.services import alumno_service, capacidad_service

router = APIRouter(prefix="/alumnos", tags=["Alumnos"])

@router.get("")
def get_alumnos(
    usuario: UsuarioActual = Depends(requiere_admin),
    db: Session = Depends(get_db)
):
    """Alumnos activos ordenados por nombre, con sus horarios activos"""
    return responder(alumno_service.listar_alumnos(db))


# Declarada antes de /{id_alumno} para que "capacidad-horario" no se lea como id
@router.get("/capacidad-horario")
def capacidad_horario(
    dia_semana: int = Query(..., description="1=Lunes .. 7=Domingo"),
    hora_inicio: time = Query(...),
    hora_fin: time = Query(...),
    excluir_alumno_id: Optional[UUID] = Query(None, description="Alumno que no cuenta (edición de horarios)"),
    usuario: UsuarioActual = Depends(requiere_admin),
    db: Session = Depends(get_db)
):
    """Indica si el horario semanal admite un alumno más"""
    return responder(
        capacidad_service.comprobar_capacidad_horario(db, dia_semana, hora_inicio, hora_fin, excluir_alumno_id)
    )


@router.get("/dni/{dni}")
def get_alumno_por_dni(
    dni: str,
    usuario: UsuarioActual = Depends(requiere_admin),
    db: Session = Depends(get_db)
):
    return responder(alumno_service.obtener_alumno_por_dni(db, dni))


@router.get("/{id_alumno}")
def get_alumno(
    id_alumno: UUID,
    usuario: UsuarioActual = Depends(get_usuario_actual),
    db: Session = Depends(get_db)
):
    verificar_acceso_alumno(usuario, id_alumno)
    return responder(alumno_service.obtener_alumno(db, id_alumno))


@router.post("")
def crear_alumno(
    data: AlumnoCreate,
    usuario: UsuarioActual = Depends(requiere_admin),
    db: Session = Depends(get_db)
):
    """
    Crea un alumno con sus horarios semanales.

    Si algún horario está completo no se crea nada.
    """
    return responder(alumno_service.crear_alumno(db, data), status_exito=status.HTTP_201_CREATED)


@router.put("/{id_alumno}")
def actualizar_alumno(
    id_alumno: UUID,
    data: AlumnoUpdate,
    usuario: UsuarioActual = Depends(requiere_admin),
    db: Session = Depends(get_db)
):
    return responder(alumno_service.actualizar_alumno(db, id_alumno, data))


@router.delete("/{id_alumno}")
def eliminar_alumno(
    id_alumno: UUID,
    usuario: UsuarioActual = Depends(requiere_admin),
    db: Session = Depends(get_db)
):
    """Baja lógica: el alumno y sus horarios quedan inactivos"""
    return responder(alumno_service.eliminar_alumno(db, id_alumno))
