from datetime import date, datetime, timezone
from uuid import uuid4

import pytest

from app.core.config import settings
from app.models.clase_recuperacion import ClaseRecuperacion
from app.schemas.recuperacion import RecuperacionCreate
from app.services.recuperacion_service import obtener_recuperaciones_disponibles, reservar_recuperacion
from tests.conftest import H10, H12, H14, H16, H18

LUNES_17 = date(2025, 3, 17)
MIERCOLES_12 = date(2025, 3, 12)


@pytest.fixture
def alumno_con_cancelacion(crear_alumno, crear_horario, crear_cancelacion):
    """Alumno con clase los lunes 12-14 que ha cancelado la del 17"""
    alumno = crear_alumno()
    horario = crear_horario(alumno, 1, H12, H14)
    cancelacion = crear_cancelacion(alumno, horario, LUNES_17)
    return alumno, horario, cancelacion


def _reservar(db, alumno, cancelacion, fecha, reloj, inicio=H16, fin=H18):
    datos = RecuperacionCreate(
        fecha_clase=fecha,
        hora_inicio=inicio,
        hora_fin=fin,
        id_cancelacion_original=cancelacion.id_cancelacion if cancelacion else uuid4(),
    )
    return reservar_recuperacion(db, alumno.id_alumno, datos, reloj)


def test_reserva_correcta(db, reloj, alumno_con_cancelacion):
    alumno, _, cancelacion = alumno_con_cancelacion

    respuesta = _reservar(db, alumno, cancelacion, MIERCOLES_12, reloj)

    assert respuesta.success
    assert respuesta.data.id_cancelacion_original == cancelacion.id_cancelacion
    assert respuesta.data.rango_horario == "16:00-18:00"
    assert obtener_recuperaciones_disponibles(db, alumno.id_alumno).data == []


def test_sin_cancelaciones_disponibles(db, reloj, crear_alumno, crear_horario):
    alumno = crear_alumno()
    crear_horario(alumno, 1, H12, H14)

    respuesta = _reservar(db, alumno, None, MIERCOLES_12, reloj)

    assert respuesta.code == "NoAvailableRecovery"
    assert respuesta.http_status == 400


def test_cancelacion_de_otro_alumno(db, reloj, alumno_con_cancelacion, crear_alumno, crear_horario, crear_cancelacion):
    _, _, ajena = alumno_con_cancelacion
    alumno = crear_alumno()
    propio = crear_horario(alumno, 2, H10, H12)
    crear_cancelacion(alumno, propio, date(2025, 3, 18))

    respuesta = _reservar(db, alumno, ajena, MIERCOLES_12, reloj)

    assert respuesta.code == "CancellationNotFound"
    assert respuesta.http_status == 404


def test_cancelacion_ya_recuperada(db, reloj, alumno_con_cancelacion, crear_cancelacion, crear_recuperacion):
    alumno, horario, cancelacion = alumno_con_cancelacion
    crear_recuperacion(alumno, cancelacion, MIERCOLES_12, H16, H18)
    # Otra cancelación sin recuperar para que haya saldo
    crear_cancelacion(alumno, horario, date(2025, 3, 24))

    respuesta = _reservar(db, alumno, cancelacion, date(2025, 3, 13), reloj)

    assert respuesta.code == "AlreadyRecovered"
    assert respuesta.http_status == 409
    assert db.query(ClaseRecuperacion).count() == 1


def test_fecha_de_hoy_no_es_futura(db, reloj, alumno_con_cancelacion):
    alumno, _, cancelacion = alumno_con_cancelacion
    reloj.fijar(datetime(2025, 3, 12, 8, 0, tzinfo=timezone.utc))

    respuesta = _reservar(db, alumno, cancelacion, MIERCOLES_12, reloj)

    assert respuesta.code == "DateNotFuture"


def test_no_coincide_con_dia_de_clase(db, reloj, alumno_con_cancelacion):
    alumno, _, cancelacion = alumno_con_cancelacion

    respuesta = _reservar(db, alumno, cancelacion, date(2025, 3, 24), reloj)

    assert respuesta.code == "ConflictsWithRegularSchedule"


def test_franja_invertida(db, reloj, alumno_con_cancelacion):
    alumno, _, cancelacion = alumno_con_cancelacion

    respuesta = _reservar(db, alumno, cancelacion, MIERCOLES_12, reloj, inicio=H18, fin=H16)

    assert respuesta.code == "InvalidInput"


def test_orden_de_comprobaciones(db, reloj, alumno_con_cancelacion, llenar_horario):
    # Franja llena y además fecha pasada: gana SlotFull por ir antes
    alumno, _, cancelacion = alumno_con_cancelacion
    llenar_horario(1, H16, H18, 10)

    respuesta = _reservar(db, alumno, cancelacion, date(2025, 3, 3), reloj)

    assert respuesta.code == "SlotFull"


def test_disponibles_de_mas_reciente_a_mas_antigua(db, alumno_con_cancelacion, crear_cancelacion, crear_recuperacion):
    alumno, horario, primera = alumno_con_cancelacion
    segunda = crear_cancelacion(alumno, horario, date(2025, 3, 24), cancelado_en=datetime(2025, 3, 11, 10, 0))
    tercera = crear_cancelacion(alumno, horario, date(2025, 3, 31), cancelado_en=datetime(2025, 3, 12, 10, 0))
    crear_recuperacion(alumno, segunda, date(2025, 3, 19), H16, H18)

    respuesta = obtener_recuperaciones_disponibles(db, alumno.id_alumno)

    assert [c.id_cancelacion for c in respuesta.data] == [tercera.id_cancelacion, primera.id_cancelacion]
    assert respuesta.data[0].horario_original.rango_horario == "12:00-14:00"


# ---------------------------------------------------------------------------
# Techo de plazas al reservar
# ---------------------------------------------------------------------------

def test_techo_fijo_de_diez_aunque_el_catalogo_admita_mas(db, reloj, alumno_con_cancelacion, crear_franja, llenar_horario):
    alumno, _, cancelacion = alumno_con_cancelacion
    crear_franja(3, H16, H18, capacidad=20)
    llenar_horario(3, H16, H18, 10)

    assert settings.RECOVERY_CAPACITY_SOURCE == "fixed"
    respuesta = _reservar(db, alumno, cancelacion, MIERCOLES_12, reloj)

    assert respuesta.code == "SlotFull"


def test_techo_fijo_ignora_capacidad_menor_del_catalogo(db, reloj, alumno_con_cancelacion, crear_franja, llenar_horario):
    alumno, _, cancelacion = alumno_con_cancelacion
    crear_franja(3, H16, H18, capacidad=2)
    llenar_horario(3, H16, H18, 2)

    respuesta = _reservar(db, alumno, cancelacion, MIERCOLES_12, reloj)

    assert respuesta.success


def test_techo_del_catalogo(db, reloj, alumno_con_cancelacion, crear_franja, llenar_horario, monkeypatch):
    monkeypatch.setattr(settings, "RECOVERY_CAPACITY_SOURCE", "catalog")
    alumno, _, cancelacion = alumno_con_cancelacion
    crear_franja(3, H16, H18, capacidad=2)
    llenar_horario(3, H16, H18, 2)

    respuesta = _reservar(db, alumno, cancelacion, MIERCOLES_12, reloj)

    assert respuesta.code == "SlotFull"


def test_techo_del_catalogo_admite_mas_de_diez(db, reloj, alumno_con_cancelacion, crear_franja, llenar_horario, monkeypatch):
    monkeypatch.setattr(settings, "RECOVERY_CAPACITY_SOURCE", "catalog")
    alumno, _, cancelacion = alumno_con_cancelacion
    crear_franja(3, H16, H18, capacidad=20)
    llenar_horario(3, H16, H18, 10)

    respuesta = _reservar(db, alumno, cancelacion, MIERCOLES_12, reloj)

    assert respuesta.success
