from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.reloj import Reloj
from app.dependencies.auth import get_id_alumno_actual, get_usuario_actual, requiere_admin, verificar_acceso_alumno
from app.dependencies.db import get_db
from app.dependencies.reloj import get_reloj
from app.routes.respuestas import responder
from app.schemas.auth import UsuarioActual
from app.schemas.cancelacion import CancelacionCreate
from app.schemas.recuperacion import RecuperacionCreate
from app.services import calendario_service, cancelacion_service, capacidad_service, recuperacion_service

router = APIRouter(prefix="/calendario", tags=["Calendario"])


def _alumno_objetivo(usuario: UsuarioActual, id_alumno: Optional[UUID]) -> UUID:
    """El alumno autenticado, o el indicado en la petición si quien llama es administrador"""
    if id_alumno is None:
        return get_id_alumno_actual(usuario)
    verificar_acceso_alumno(usuario, id_alumno)
    return id_alumno


@router.get("/alumno/{id_alumno}/{anio}/{mes}")
def calendario_alumno(
    id_alumno: UUID,
    anio: int,
    mes: int,
    usuario: UsuarioActual = Depends(get_usuario_actual),
    db: Session = Depends(get_db),
    reloj: Reloj = Depends(get_reloj)
):
    """Calendario mensual de un alumno: clases, cancelaciones, recuperaciones y franjas libres por día"""
    verificar_acceso_alumno(usuario, id_alumno)
    return responder(calendario_service.obtener_calendario_alumno(db, id_alumno, anio, mes, reloj))


@router.get("/mi-calendario/{anio}/{mes}")
def mi_calendario(
    anio: int,
    mes: int,
    id_alumno: UUID = Depends(get_id_alumno_actual),
    db: Session = Depends(get_db),
    reloj: Reloj = Depends(get_reloj)
):
    return responder(calendario_service.obtener_calendario_alumno(db, id_alumno, anio, mes, reloj))


@router.get("/slots-disponibles/{fecha}")
def slots_disponibles(
    fecha: date,
    usuario: UsuarioActual = Depends(get_usuario_actual),
    db: Session = Depends(get_db),
    reloj: Reloj = Depends(get_reloj)
):
    """Franjas con plazas libres para una fecha futura de lunes a viernes"""
    return responder(capacidad_service.obtener_slots_disponibles(db, fecha, reloj))


@router.get("/puede-cancelar/{id_alumno}/{fecha}")
def puede_cancelar(
    id_alumno: UUID,
    fecha: date,
    usuario: UsuarioActual = Depends(get_usuario_actual),
    db: Session = Depends(get_db),
    reloj: Reloj = Depends(get_reloj)
):
    verificar_acceso_alumno(usuario, id_alumno)
    return responder(cancelacion_service.puede_cancelar(db, id_alumno, fecha, reloj))


@router.get("/puede-cancelar-mi-clase/{fecha}")
def puede_cancelar_mi_clase(
    fecha: date,
    id_alumno: UUID = Depends(get_id_alumno_actual),
    db: Session = Depends(get_db),
    reloj: Reloj = Depends(get_reloj)
):
    return responder(cancelacion_service.puede_cancelar(db, id_alumno, fecha, reloj))


@router.post("/cancelar-clase")
def cancelar_clase(
    data: CancelacionCreate,
    id_alumno: Optional[UUID] = Query(None, description="Solo administradores: alumno en cuyo nombre se cancela"),
    usuario: UsuarioActual = Depends(get_usuario_actual),
    db: Session = Depends(get_db),
    reloj: Reloj = Depends(get_reloj)
):
    """
    Cancela la clase de una fecha concreta.

    - Requiere al menos 24 horas de antelación (desde las 00:00 UTC del día de la clase)
    - La cancelación da derecho a una clase de recuperación
    """
    objetivo = _alumno_objetivo(usuario, id_alumno)
    return responder(
        cancelacion_service.cancelar_clase(db, objetivo, data, reloj),
        status_exito=status.HTTP_201_CREATED
    )


@router.post("/reservar-recuperacion")
def reservar_recuperacion(
    data: RecuperacionCreate,
    id_alumno: Optional[UUID] = Query(None, description="Solo administradores: alumno en cuyo nombre se reserva"),
    usuario: UsuarioActual = Depends(get_usuario_actual),
    db: Session = Depends(get_db),
    reloj: Reloj = Depends(get_reloj)
):
    objetivo = _alumno_objetivo(usuario, id_alumno)
    return responder(
        recuperacion_service.reservar_recuperacion(db, objetivo, data, reloj),
        status_exito=status.HTTP_201_CREATED
    )


@router.get("/recuperaciones-disponibles/{id_alumno}")
def recuperaciones_disponibles(
    id_alumno: UUID,
    usuario: UsuarioActual = Depends(get_usuario_actual),
    db: Session = Depends(get_db)
):
    verificar_acceso_alumno(usuario, id_alumno)
    return responder(recuperacion_service.obtener_recuperaciones_disponibles(db, id_alumno))


@router.get("/mis-recuperaciones-disponibles")
def mis_recuperaciones_disponibles(
    id_alumno: UUID = Depends(get_id_alumno_actual),
    db: Session = Depends(get_db)
):
    return responder(recuperacion_service.obtener_recuperaciones_disponibles(db, id_alumno))


@router.get("/estadisticas/{anio}/{mes}")
def estadisticas(
    anio: int,
    mes: int,
    usuario: UsuarioActual = Depends(requiere_admin),
    db: Session = Depends(get_db)
):
    return responder(calendario_service.obtener_estadisticas(db, anio, mes))
