"""
Administración de alumnos y de sus horarios semanales.

El alta de un alumno con varios horarios es una única transacción: la
capacidad de cada horario se comprueba justo antes de insertarlo y el primer
horario completo deshace todo el alta.
"""

import logging
import re
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dias import formatear_rango, nombre_dia
from app.core.errors import AlumnoNoEncontrado, DniDuplicado, EntradaInvalida, ErrorDominio, HorarioCompleto
from app.models.alumno import Alumno
from app.models.horario import Horario
from app.repositories.alumno_repository import AlumnoRepository
from app.repositories.calendario_repository import CalendarioRepository
from app.schemas.alumno import AlumnoCreate, AlumnoResponse, AlumnoUpdate
from app.schemas.horario import HorarioCreate, HorarioResponse
from app.services.base import operacion
from app.services.capacidad_service import hay_capacidad_horario, validar_franja

logger = logging.getLogger(__name__)

DNI_ADMIN = "ADMIN"
LETRAS_DNI = "TRWAGMYFPDXBNJZSQVHLCKE"
_FORMATO_DNI = re.compile(r"^(\d{8})([A-Z])$")


def normalizar_dni(dni: str | None) -> str:
    return (dni or "").strip().upper()


def es_dni_valido(dni: str) -> bool:
    """8 dígitos y letra de control (número módulo 23)"""
    coincidencia = _FORMATO_DNI.match(dni)
    if not coincidencia:
        return False
    numero, letra = coincidencia.groups()
    return LETRAS_DNI[int(numero) % 23] == letra


def a_alumno_response(db: Session, alumno: Alumno) -> AlumnoResponse:
    horarios = CalendarioRepository(db).horarios_del_alumno(alumno.id_alumno, solo_activos=False)
    respuesta = AlumnoResponse.model_validate(alumno)
    respuesta.horarios = [HorarioResponse.model_validate(h) for h in horarios if h.activo]
    return respuesta


def _validar_horarios(horarios: list[HorarioCreate]) -> list[str]:
    errores = []
    for indice, horario in enumerate(horarios):
        errores.extend(validar_franja(horario.dia_semana, horario.hora_inicio, horario.hora_fin, f"horarios[{indice}]"))
    return errores


def _agregar_horarios(
    db: Session,
    id_alumno: UUID,
    horarios: list[HorarioCreate],
    excluir_alumno_id: UUID | None = None,
) -> None:
    repo = CalendarioRepository(db)
    for horario in horarios:
        if not hay_capacidad_horario(db, horario.dia_semana, horario.hora_inicio, horario.hora_fin, excluir_alumno_id):
            rango = formatear_rango(horario.hora_inicio, horario.hora_fin)
            logger.warning("Horario completo: %s %s", nombre_dia(horario.dia_semana), rango)
            raise HorarioCompleto(f"El horario del {nombre_dia(horario.dia_semana)} {rango} está completo")
        # flush por horario: el siguiente ya cuenta con este
        repo.agregar(Horario(
            id_alumno=id_alumno,
            dia_semana=horario.dia_semana,
            hora_inicio=horario.hora_inicio,
            hora_fin=horario.hora_fin,
            activo=True,
        ))


@operacion("Alumnos obtenidos correctamente")
def listar_alumnos(db: Session) -> list[AlumnoResponse]:
    alumnos = AlumnoRepository(db).listar(solo_activos=True)
    logger.info("Listando %d alumnos activos", len(alumnos))
    return [a_alumno_response(db, alumno) for alumno in alumnos]


@operacion("Alumno obtenido correctamente")
def obtener_alumno(db: Session, id_alumno: UUID) -> AlumnoResponse:
    alumno = AlumnoRepository(db).obtener(id_alumno, solo_activos=True)
    if alumno is None:
        raise AlumnoNoEncontrado()
    return a_alumno_response(db, alumno)


@operacion("Alumno obtenido correctamente")
def obtener_alumno_por_dni(db: Session, dni: str) -> AlumnoResponse:
    alumno = AlumnoRepository(db).obtener_por_dni(normalizar_dni(dni), solo_activos=True)
    if alumno is None:
        raise AlumnoNoEncontrado()
    return a_alumno_response(db, alumno)


@operacion("Alumno creado correctamente")
def crear_alumno(db: Session, datos: AlumnoCreate) -> AlumnoResponse:
    dni = normalizar_dni(datos.dni)
    nombre = (datos.nombre or "").strip()
    logger.info("Creando alumno con DNI %s y %d horarios", dni, len(datos.horarios))

    errores = []
    if not nombre:
        errores.append("nombre: es obligatorio")
    if not dni:
        errores.append("dni: es obligatorio")
    elif not es_dni_valido(dni):
        errores.append("dni: formato no válido")
    errores.extend(_validar_horarios(datos.horarios))
    if errores:
        raise EntradaInvalida("Datos del alumno no válidos", errores)

    repo = AlumnoRepository(db)
    # El DNI es único también entre alumnos dados de baja
    if repo.obtener_por_dni(dni, solo_activos=False) is not None:
        raise DniDuplicado()

    try:
        alumno = repo.agregar(Alumno(
            nombre=nombre,
            dni=dni,
            email=datos.email,
            telefono=datos.telefono,
            activo=True,
        ))
        _agregar_horarios(db, alumno.id_alumno, datos.horarios)
        db.commit()
    except ErrorDominio:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        if repo.obtener_por_dni(dni, solo_activos=False) is not None:
            raise DniDuplicado()
        raise
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(alumno)
    logger.info("Alumno %s creado", alumno.id_alumno)
    return a_alumno_response(db, alumno)


def _dar_de_baja(db: Session, alumno: Alumno, ahora: datetime) -> None:
    """Baja lógica del alumno y de todos sus horarios, con la misma marca de baja"""
    for horario in CalendarioRepository(db).horarios_del_alumno(alumno.id_alumno, solo_activos=True):
        horario.activo = False
        horario.desactivado_en = ahora
    alumno.activo = False
    alumno.updated_at = ahora
    db.flush()


def _reactivar(db: Session, alumno: Alumno) -> None:
    """
    Vuelve a dar de alta al alumno con los horarios de su última baja.
    Cada horario se restaura sólo si su franja tiene plaza; el primero completo
    lanza HorarioCompleto y la transacción se deshace.
    """
    alumno.activo = True
    db.flush()
    for horario in CalendarioRepository(db).horarios_de_la_ultima_baja(alumno.id_alumno):
        if not hay_capacidad_horario(db, horario.dia_semana, horario.hora_inicio, horario.hora_fin):
            rango = formatear_rango(horario.hora_inicio, horario.hora_fin)
            logger.warning("No se puede reactivar el alumno %s: %s %s completo", alumno.id_alumno, nombre_dia(horario.dia_semana), rango)
            raise HorarioCompleto(f"El horario del {nombre_dia(horario.dia_semana)} {rango} está completo")
        horario.activo = True
        horario.desactivado_en = None
        db.flush()
    logger.info("Alumno %s reactivado", alumno.id_alumno)


@operacion("Alumno actualizado correctamente")
def actualizar_alumno(db: Session, id_alumno: UUID, datos: AlumnoUpdate) -> AlumnoResponse:
    logger.info("Actualizando alumno %s", id_alumno)
    # Se admite reactivar un alumno dado de baja
    alumno = AlumnoRepository(db).obtener(id_alumno, solo_activos=False)
    if alumno is None:
        raise AlumnoNoEncontrado()

    activo = alumno.activo if datos.activo is None else datos.activo
    nombre = (datos.nombre or "").strip()
    errores = [] if nombre else ["nombre: es obligatorio"]
    if datos.horarios is not None:
        if not activo:
            errores.append("horarios: no se pueden asignar a un alumno dado de baja")
        errores.extend(_validar_horarios(datos.horarios))
    if errores:
        raise EntradaInvalida("Datos del alumno no válidos", errores)

    ahora = datetime.now(timezone.utc)
    try:
        alumno.nombre = nombre
        alumno.email = datos.email
        alumno.telefono = datos.telefono
        alumno.updated_at = ahora

        if alumno.activo and not activo:
            _dar_de_baja(db, alumno, ahora)
        elif not alumno.activo and activo:
            if datos.horarios is None:
                _reactivar(db, alumno)
            else:
                alumno.activo = True
                db.flush()

        if datos.horarios is not None:
            for horario in CalendarioRepository(db).horarios_del_alumno(id_alumno, solo_activos=True):
                horario.activo = False
                horario.desactivado_en = ahora
            db.flush()
            _agregar_horarios(db, id_alumno, datos.horarios, excluir_alumno_id=id_alumno)

        db.commit()
    except ErrorDominio:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(alumno)
    return a_alumno_response(db, alumno)


@operacion("Alumno eliminado correctamente")
def eliminar_alumno(db: Session, id_alumno: UUID) -> None:
    alumno = AlumnoRepository(db).obtener(id_alumno, solo_activos=True)
    if alumno is None:
        raise AlumnoNoEncontrado()

    try:
        _dar_de_baja(db, alumno, datetime.now(timezone.utc))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("Alumno %s dado de baja", id_alumno)
    return None


@operacion("DNI comprobado")
def validar_dni(db: Session, dni: str) -> bool:
    dni = normalizar_dni(dni)
    if dni == DNI_ADMIN and settings.ADMIN_LOGIN_ENABLED:
        return True
    return AlumnoRepository(db).obtener_por_dni(dni, solo_activos=True) is not None
