import itertools
import os
from datetime import datetime, time, timezone

# Antes de importar la aplicación: Settings exige la clave y el motor se crea al importar
os.environ.setdefault("JWT_SECRET_KEY", "clave-de-pruebas")
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.reloj import RelojFijo
from app.core.security import create_access_token
from app.database.base import Base
from app.dependencies.db import get_db
from app.dependencies.reloj import get_reloj
from app.main import app
from app.models import Alumno, Cancelacion, ClaseRecuperacion, FranjaHoraria, Horario

LETRAS_DNI = "TRWAGMYFPDXBNJZSQVHLCKE"

H10, H12, H14, H16, H18 = time(10), time(12), time(14), time(16), time(18)

# Lunes
AHORA = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


def dni_valido(n: int) -> str:
    return f"{n:08d}{LETRAS_DNI[n % 23]}"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def reloj():
    return RelojFijo(AHORA)


# ---------------------------------------------------------------------------
# Factorías
# ---------------------------------------------------------------------------

@pytest.fixture
def crear_alumno(db):
    contador = itertools.count(1)

    def _crear(nombre=None, activo=True, dni=None):
        n = next(contador)
        alumno = Alumno(
            nombre=nombre or f"Alumno {n:02d}",
            dni=dni or dni_valido(n),
            email=f"alumno{n}@example.com",
            activo=activo,
        )
        db.add(alumno)
        db.commit()
        return alumno

    return _crear


@pytest.fixture
def crear_horario(db):
    def _crear(alumno, dia, hora_inicio, hora_fin, activo=True):
        horario = Horario(
            id_alumno=alumno.id_alumno,
            dia_semana=dia,
            hora_inicio=hora_inicio,
            hora_fin=hora_fin,
            activo=activo,
        )
        db.add(horario)
        db.commit()
        return horario

    return _crear


@pytest.fixture
def crear_franja(db):
    def _crear(dia, hora_inicio, hora_fin, capacidad=10, activo=True):
        franja = FranjaHoraria(
            dia_semana=dia,
            hora_inicio=hora_inicio,
            hora_fin=hora_fin,
            capacidad_maxima=capacidad,
            activo=activo,
        )
        db.add(franja)
        db.commit()
        return franja

    return _crear


@pytest.fixture
def crear_cancelacion(db):
    def _crear(alumno, horario, fecha, cancelado_en=AHORA):
        cancelacion = Cancelacion(
            id_alumno=alumno.id_alumno,
            id_horario_original=horario.id_horario,
            fecha_clase=fecha,
            cancelado_en=cancelado_en,
        )
        db.add(cancelacion)
        db.commit()
        return cancelacion

    return _crear


@pytest.fixture
def crear_recuperacion(db):
    def _crear(alumno, cancelacion, fecha, hora_inicio, hora_fin):
        recuperacion = ClaseRecuperacion(
            id_alumno=alumno.id_alumno,
            id_cancelacion_original=cancelacion.id_cancelacion,
            fecha_clase=fecha,
            hora_inicio=hora_inicio,
            hora_fin=hora_fin,
            reservado_en=AHORA,
        )
        db.add(recuperacion)
        db.commit()
        return recuperacion

    return _crear


@pytest.fixture
def llenar_horario(crear_alumno, crear_horario):
    """Crea `cuantos` alumnos activos con el mismo horario semanal"""
    def _llenar(dia, hora_inicio, hora_fin, cuantos):
        horarios = []
        for _ in range(cuantos):
            horarios.append(crear_horario(crear_alumno(), dia, hora_inicio, hora_fin))
        return horarios

    return _llenar


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------

@pytest.fixture
def client(db, reloj):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_reloj] = lambda: reloj
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token, _ = create_access_token(dni="ADMIN", nombre="Administrador", es_admin=True)
    return {"Authorization": f"Bearer {token}"}


def cabeceras_alumno(alumno) -> dict:
    token, _ = create_access_token(
        dni=alumno.dni,
        nombre=alumno.nombre,
        es_admin=False,
        id_alumno=alumno.id_alumno,
    )
    return {"Authorization": f"Bearer {token}"}
