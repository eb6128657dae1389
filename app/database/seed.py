"""
Datos iniciales: catálogo de franjas de lunes a viernes y, opcionalmente,
alumnos de demostración. Se puede ejecutar varias veces sin duplicar filas.
"""

import logging
from datetime import time

from sqlalchemy.orm import Session

from app.core.dias import LUNES, VIERNES
from app.models.alumno import Alumno
from app.models.franja_horaria import CAPACIDAD_POR_DEFECTO, FranjaHoraria
from app.repositories.alumno_repository import AlumnoRepository
from app.repositories.calendario_repository import CalendarioRepository

logger = logging.getLogger(__name__)

FRANJAS_ESTANDAR = [
    (time(10, 0), time(12, 0)),
    (time(12, 0), time(14, 0)),
    (time(16, 0), time(18, 0)),
    (time(18, 0), time(20, 0)),
]

ALUMNOS_DEMO = [
    ("María García López", "12345678Z", "maria.garcia@email.com", "666123456"),
    ("Ana López Martín", "87654321X", "ana.lopez@email.com", "666654321"),
    ("Carmen Ruiz Sánchez", "11223344B", "carmen.ruiz@email.com", "666112233"),
    ("Marta Sánchez Rodríguez", "55667788Z", "marta.sanchez@email.com", "666556677"),
    ("Rosa Martín González", "99887766P", "rosa.martin@email.com", "666998877"),
]


def sembrar_franjas(db: Session) -> int:
    repo = CalendarioRepository(db)
    creadas = 0
    for dia in range(LUNES, VIERNES + 1):
        for hora_inicio, hora_fin in FRANJAS_ESTANDAR:
            if repo.obtener_franja(dia, hora_inicio, hora_fin, solo_activas=False):
                continue
            db.add(FranjaHoraria(
                dia_semana=dia,
                hora_inicio=hora_inicio,
                hora_fin=hora_fin,
                capacidad_maxima=CAPACIDAD_POR_DEFECTO,
                activo=True,
            ))
            creadas += 1
    db.commit()
    logger.info("Franjas creadas: %d", creadas)
    return creadas


def sembrar_alumnos_demo(db: Session) -> int:
    repo = AlumnoRepository(db)
    creados = 0
    for nombre, dni, email, telefono in ALUMNOS_DEMO:
        if repo.obtener_por_dni(dni, solo_activos=False):
            continue
        db.add(Alumno(nombre=nombre, dni=dni, email=email, telefono=telefono, activo=True))
        creados += 1
    db.commit()
    logger.info("Alumnos de demostración creados: %d", creados)
    return creados
