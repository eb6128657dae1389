from datetime import date
from uuid import uuid4

from app.services.calendario_service import armar_calendario, calcular_estadisticas, obtener_calendario_alumno, obtener_estadisticas
from tests.conftest import H10, H12, H14, H16, H18


def _dia(calendario, fecha):
    return next(d for d in calendario.dias if d.fecha == fecha)


def test_un_dia_por_fecha_del_mes(db, reloj, crear_alumno):
    alumno = crear_alumno()

    marzo = armar_calendario(db, alumno.id_alumno, 2025, 3, reloj)
    febrero = armar_calendario(db, alumno.id_alumno, 2024, 2, reloj)

    assert [d.fecha for d in marzo.dias] == [date(2025, 3, n) for n in range(1, 32)]
    assert len(febrero.dias) == 29


def test_clases_cancelaciones_y_recuperaciones(
    db, reloj, crear_alumno, crear_horario, crear_cancelacion, crear_recuperacion
):
    alumno = crear_alumno()
    lunes = crear_horario(alumno, 1, H12, H14)
    cancelacion = crear_cancelacion(alumno, lunes, date(2025, 3, 17))
    crear_recuperacion(alumno, cancelacion, date(2025, 3, 19), H16, H18)

    calendario = armar_calendario(db, alumno.id_alumno, 2025, 3, reloj)

    dia_17 = _dia(calendario, date(2025, 3, 17))
    assert len(dia_17.clases) == 1
    assert dia_17.clases[0].cancelada is True
    assert dia_17.clases[0].puede_cancelar is False
    assert dia_17.cancelaciones[0].id_cancelacion == cancelacion.id_cancelacion

    dia_24 = _dia(calendario, date(2025, 3, 24))
    assert dia_24.clases[0].cancelada is False
    assert dia_24.clases[0].puede_cancelar is True
    assert dia_24.clases[0].rango_horario == "12:00-14:00"

    dia_19 = _dia(calendario, date(2025, 3, 19))
    assert dia_19.clases == []
    assert dia_19.clases_recuperacion[0].rango_horario == "16:00-18:00"

    # Lunes de hoy: ya no se puede cancelar
    assert _dia(calendario, date(2025, 3, 10)).clases[0].puede_cancelar is False


def test_horario_de_domingo_solo_en_domingos(db, reloj, crear_alumno, crear_horario):
    alumno = crear_alumno()
    crear_horario(alumno, 7, H10, H12)

    calendario = armar_calendario(db, alumno.id_alumno, 2025, 3, reloj)

    con_clase = [d.fecha for d in calendario.dias if d.clases]
    assert con_clase == [date(2025, 3, 2), date(2025, 3, 9), date(2025, 3, 16), date(2025, 3, 23), date(2025, 3, 30)]
    assert not _dia(calendario, date(2025, 3, 16)).disponible


def test_franjas_libres_solo_en_dias_futuros_sin_clase(db, reloj, crear_alumno, crear_horario, crear_franja):
    alumno = crear_alumno()
    crear_horario(alumno, 1, H12, H14)
    for dia in range(1, 8):
        crear_franja(dia, H16, H18)

    calendario = armar_calendario(db, alumno.id_alumno, 2025, 3, reloj)

    assert _dia(calendario, date(2025, 3, 5)).slots_disponibles == []
    assert _dia(calendario, date(2025, 3, 10)).slots_disponibles == []
    assert _dia(calendario, date(2025, 3, 17)).slots_disponibles == []
    assert _dia(calendario, date(2025, 3, 15)).slots_disponibles == []
    assert len(_dia(calendario, date(2025, 3, 18)).slots_disponibles) == 1


def test_lecturas_idempotentes(db, reloj, crear_alumno, crear_horario, crear_cancelacion, crear_franja):
    alumno = crear_alumno()
    horario = crear_horario(alumno, 2, H10, H12)
    crear_cancelacion(alumno, horario, date(2025, 3, 18))
    crear_franja(3, H10, H12)

    primera = obtener_calendario_alumno(db, alumno.id_alumno, 2025, 3, reloj)
    segunda = obtener_calendario_alumno(db, alumno.id_alumno, 2025, 3, reloj)

    assert primera.a_json() == segunda.a_json()


def test_periodo_fuera_de_rango(db, reloj, crear_alumno):
    alumno = crear_alumno()

    for anio, mes in [(2025, 0), (2025, 13), (2019, 5), (2031, 1)]:
        respuesta = obtener_calendario_alumno(db, alumno.id_alumno, anio, mes, reloj)
        assert respuesta.code == "InvalidInput"
        assert respuesta.errors


def test_alumno_inexistente_o_de_baja(db, reloj, crear_alumno):
    de_baja = crear_alumno(activo=False)

    assert obtener_calendario_alumno(db, uuid4(), 2025, 3, reloj).code == "StudentNotFound"
    assert obtener_calendario_alumno(db, de_baja.id_alumno, 2025, 3, reloj).code == "StudentNotFound"


def test_estadisticas_del_mes(db, crear_alumno, crear_horario, crear_cancelacion, crear_recuperacion, crear_franja):
    # Marzo 2025: 5 lunes, 4 martes
    ana = crear_alumno()
    lunes = crear_horario(ana, 1, H10, H12)
    luis = crear_alumno()
    crear_horario(luis, 2, H10, H12)
    crear_horario(crear_alumno(activo=False), 3, H10, H12)
    crear_franja(1, H10, H12, capacidad=2)
    cancelacion = crear_cancelacion(ana, lunes, date(2025, 3, 17))
    crear_recuperacion(ana, cancelacion, date(2025, 3, 19), H16, H18)
    crear_cancelacion(ana, lunes, date(2025, 4, 7))

    estadisticas = calcular_estadisticas(db, 2025, 3)

    assert estadisticas.total_clases == 9
    assert estadisticas.clases_canceladas == 1
    assert estadisticas.clases_recuperacion == 1
    assert estadisticas.clases_por_dia == {"Lunes": 5, "Martes": 4}
    assert estadisticas.clases_por_franja == {"10:00-12:00": 9}
    # 9 ocupadas sobre 5 lunes x 2 plazas
    assert estadisticas.tasa_ocupacion == 90.0


def test_estadisticas_sin_catalogo(db):
    respuesta = obtener_estadisticas(db, 2025, 3)

    assert respuesta.success
    assert respuesta.data.total_clases == 0
    assert respuesta.data.tasa_ocupacion == 0.0
    assert obtener_estadisticas(db, 2025, 13).code == "InvalidInput"
