from datetime import date

import pytest

from app.core.errors import EntradaInvalida
from app.schemas.cancelacion import CancelacionCreate
from app.services.cancelacion_service import cancelar_clase
from app.services.capacidad_service import (
    comprobar_capacidad_horario,
    contar_ocupados,
    hay_capacidad_horario,
    obtener_slots_disponibles,
    slots_disponibles,
)
from tests.conftest import H10, H12, H14, H16, H18

LUNES_17 = date(2025, 3, 17)
MARTES_18 = date(2025, 3, 18)


def test_ocupados_regulares_menos_cancelaciones_mas_recuperaciones(
    db, llenar_horario, crear_alumno, crear_horario, crear_cancelacion, crear_recuperacion
):
    horarios = llenar_horario(1, H10, H12, 3)
    assert contar_ocupados(db, LUNES_17, H10, H12) == 3

    alumno = crear_alumno()
    propio = crear_horario(alumno, 3, H16, H18)
    cancelacion = crear_cancelacion(alumno, propio, date(2025, 3, 12))
    crear_recuperacion(alumno, cancelacion, LUNES_17, H10, H12)
    assert contar_ocupados(db, LUNES_17, H10, H12) == 4

    otro = crear_alumno()
    crear_cancelacion(otro, horarios[0], LUNES_17)
    assert contar_ocupados(db, LUNES_17, H10, H12) == 3

    # Otro lunes no se ve afectado
    assert contar_ocupados(db, date(2025, 3, 24), H10, H12) == 3


def test_ocupados_ignora_inactivos(db, crear_alumno, crear_horario):
    crear_horario(crear_alumno(), 1, H10, H12)
    crear_horario(crear_alumno(activo=False), 1, H10, H12)
    crear_horario(crear_alumno(), 1, H10, H12, activo=False)

    assert contar_ocupados(db, LUNES_17, H10, H12) == 1


def test_ocupados_nunca_negativo(db, crear_alumno, crear_horario, crear_cancelacion):
    alumno = crear_alumno()
    horario = crear_horario(alumno, 1, H10, H12)
    crear_cancelacion(alumno, horario, LUNES_17)
    # El horario se desactiva después de cancelar
    horario.activo = False
    db.commit()

    assert contar_ocupados(db, LUNES_17, H10, H12) == 0


def test_horario_de_domingo_no_ocupa_el_lunes(db, crear_alumno, crear_horario):
    crear_horario(crear_alumno(), 7, H10, H12)

    assert contar_ocupados(db, date(2025, 3, 16), H10, H12) == 1
    assert contar_ocupados(db, LUNES_17, H10, H12) == 0


def test_slots_solo_fechas_futuras_laborables(db, reloj, crear_franja):
    for dia in range(1, 8):
        crear_franja(dia, H10, H12)

    assert slots_disponibles(db, date(2025, 3, 9), reloj) == []
    assert slots_disponibles(db, reloj.hoy(), reloj) == []
    assert slots_disponibles(db, date(2025, 3, 15), reloj) == []
    assert slots_disponibles(db, date(2025, 3, 16), reloj) == []
    assert len(slots_disponibles(db, date(2025, 3, 11), reloj)) == 1


def test_slots_ordenados_y_sin_franjas_inactivas(db, reloj, crear_franja):
    crear_franja(1, H16, H18)
    crear_franja(1, H10, H12)
    crear_franja(1, H12, H14, activo=False)

    slots = slots_disponibles(db, LUNES_17, reloj)

    assert [s.rango_horario for s in slots] == ["10:00-12:00", "16:00-18:00"]
    assert slots[0].plazas_disponibles == 10
    assert slots[0].plazas_totales == 10


def test_franja_completa_y_cancelacion_libera_plaza(db, reloj, crear_franja, llenar_horario):
    crear_franja(2, H10, H12, capacidad=10)
    horarios = llenar_horario(2, H10, H12, 10)

    respuesta = obtener_slots_disponibles(db, MARTES_18, reloj)
    assert respuesta.success
    assert respuesta.data == []

    cancelada = cancelar_clase(
        db,
        horarios[0].id_alumno,
        CancelacionCreate(fecha_clase=MARTES_18, id_horario_original=horarios[0].id_horario),
        reloj,
    )
    assert cancelada.success

    slots = obtener_slots_disponibles(db, MARTES_18, reloj).data
    assert len(slots) == 1
    assert slots[0].plazas_disponibles == 1


def test_capacidad_horario_usa_catalogo_o_diez(db, crear_franja, llenar_horario):
    crear_franja(1, H10, H12, capacidad=2)
    llenar_horario(1, H10, H12, 2)
    llenar_horario(2, H10, H12, 9)

    assert hay_capacidad_horario(db, 1, H10, H12) is False
    # Sin franja en el catálogo el tope es 10
    assert hay_capacidad_horario(db, 2, H10, H12) is True
    llenar_horario(2, H10, H12, 1)
    assert hay_capacidad_horario(db, 2, H10, H12) is False


def test_capacidad_horario_excluyendo_alumno(db, crear_franja, llenar_horario):
    crear_franja(1, H10, H12, capacidad=2)
    horarios = llenar_horario(1, H10, H12, 2)

    assert hay_capacidad_horario(db, 1, H10, H12, excluir_alumno_id=horarios[0].id_alumno) is True


def test_capacidad_horario_rechaza_franja_invalida(db):
    with pytest.raises(EntradaInvalida):
        hay_capacidad_horario(db, 8, H10, H12)

    respuesta = comprobar_capacidad_horario(db, 1, H12, H10)
    assert not respuesta.success
    assert respuesta.code == "InvalidInput"
    assert respuesta.http_status == 400
