"""
Consultas del motor de calendario.

Las relaciones se resuelven por id: alumno -> horarios -> cancelaciones ->
recuperaciones. Toda consulta sobre horarios y franjas exige `solo_activos`
(o `solo_activas`) como argumento con nombre, sin valor por defecto.
"""

from datetime import date, time
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from app.models.alumno import Alumno
from app.models.cancelacion import Cancelacion
from app.models.clase_recuperacion import ClaseRecuperacion
from app.models.franja_horaria import FranjaHoraria
from app.models.horario import Horario


class CalendarioRepository:

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Horarios
    # ------------------------------------------------------------------

    def _horarios(self, *, solo_activos: bool):
        query = self.db.query(Horario)
        if solo_activos:
            # Horario activo y alumno dueño activo
            query = (
                query.join(Alumno, Alumno.id_alumno == Horario.id_alumno)
                .filter(Horario.activo == True, Alumno.activo == True)
            )
        return query

    def contar_horarios_en_franja(
        self,
        dia: int,
        hora_inicio: time,
        hora_fin: time,
        *,
        solo_activos: bool,
        excluir_alumno_id: UUID | None = None,
    ) -> int:
        query = self._horarios(solo_activos=solo_activos).filter(
            Horario.dia_semana == dia,
            Horario.hora_inicio == hora_inicio,
            Horario.hora_fin == hora_fin,
        )
        if excluir_alumno_id is not None:
            query = query.filter(Horario.id_alumno != excluir_alumno_id)
        return query.count()

    def horarios_del_alumno(self, id_alumno: UUID, *, solo_activos: bool, dia: int | None = None) -> list[Horario]:
        query = self._horarios(solo_activos=solo_activos).filter(Horario.id_alumno == id_alumno)
        if dia is not None:
            query = query.filter(Horario.dia_semana == dia)
        return query.order_by(Horario.dia_semana, Horario.hora_inicio).all()

    def obtener_horario_del_alumno(
        self,
        id_horario: UUID,
        id_alumno: UUID,
        *,
        solo_activos: bool,
        dia: int | None = None,
    ) -> Horario | None:
        query = self._horarios(solo_activos=solo_activos).filter(
            Horario.id_horario == id_horario, Horario.id_alumno == id_alumno
        )
        if dia is not None:
            query = query.filter(Horario.dia_semana == dia)
        return query.first()

    def horarios_de_la_ultima_baja(self, id_alumno: UUID) -> list[Horario]:
        """Horarios inactivos desactivados en la baja más reciente del alumno"""
        previo = aliased(Horario)
        ultima = (
            self.db.query(func.max(previo.desactivado_en))
            .filter(previo.id_alumno == id_alumno, previo.activo == False)
            .scalar_subquery()
        )
        return (
            self.db.query(Horario)
            .filter(Horario.id_alumno == id_alumno, Horario.activo == False, Horario.desactivado_en == ultima)
            .order_by(Horario.dia_semana, Horario.hora_inicio)
            .all()
        )

    def horarios(self, *, solo_activos: bool) -> list[Horario]:
        return self._horarios(solo_activos=solo_activos).all()

    def horarios_por_id(self, ids: set[UUID], *, solo_activos: bool) -> dict[UUID, Horario]:
        if not ids:
            return {}
        encontrados = self._horarios(solo_activos=solo_activos).filter(Horario.id_horario.in_(ids)).all()
        return {h.id_horario: h for h in encontrados}

    # ------------------------------------------------------------------
    # Franjas del catálogo
    # ------------------------------------------------------------------

    def _franjas(self, *, solo_activas: bool):
        query = self.db.query(FranjaHoraria)
        if solo_activas:
            query = query.filter(FranjaHoraria.activo == True)
        return query

    def franjas_del_dia(self, dia: int, *, solo_activas: bool) -> list[FranjaHoraria]:
        return (
            self._franjas(solo_activas=solo_activas)
            .filter(FranjaHoraria.dia_semana == dia)
            .order_by(FranjaHoraria.hora_inicio)
            .all()
        )

    def franjas(self, *, solo_activas: bool) -> list[FranjaHoraria]:
        return self._franjas(solo_activas=solo_activas).order_by(FranjaHoraria.dia_semana, FranjaHoraria.hora_inicio).all()

    def obtener_franja(
        self,
        dia: int,
        hora_inicio: time,
        hora_fin: time,
        *,
        solo_activas: bool,
        bloquear: bool = False,
    ) -> FranjaHoraria | None:
        query = self._franjas(solo_activas=solo_activas).filter(
            FranjaHoraria.dia_semana == dia,
            FranjaHoraria.hora_inicio == hora_inicio,
            FranjaHoraria.hora_fin == hora_fin,
        )
        if bloquear:
            # SELECT ... FOR UPDATE; SQLite lo ignora
            query = query.with_for_update()
        return query.first()

    # ------------------------------------------------------------------
    # Cancelaciones
    # ------------------------------------------------------------------

    def contar_cancelaciones_en_franja(self, fecha: date, hora_inicio: time, hora_fin: time) -> int:
        return (
            self.db.query(func.count(Cancelacion.id_cancelacion))
            .join(Horario, Horario.id_horario == Cancelacion.id_horario_original)
            .filter(
                Cancelacion.fecha_clase == fecha,
                Horario.hora_inicio == hora_inicio,
                Horario.hora_fin == hora_fin,
            )
            .scalar()
        )

    def existe_cancelacion(self, id_alumno: UUID, fecha: date) -> bool:
        return (
            self.db.query(Cancelacion.id_cancelacion)
            .filter(Cancelacion.id_alumno == id_alumno, Cancelacion.fecha_clase == fecha)
            .first()
        ) is not None

    def obtener_cancelacion_del_alumno(self, id_cancelacion: UUID, id_alumno: UUID) -> Cancelacion | None:
        return (
            self.db.query(Cancelacion)
            .filter(Cancelacion.id_cancelacion == id_cancelacion, Cancelacion.id_alumno == id_alumno)
            .first()
        )

    def cancelaciones_del_alumno(
        self,
        id_alumno: UUID,
        desde: date | None = None,
        hasta: date | None = None,
        recientes_primero: bool = False,
    ) -> list[Cancelacion]:
        query = self.db.query(Cancelacion).filter(Cancelacion.id_alumno == id_alumno)
        if desde is not None:
            query = query.filter(Cancelacion.fecha_clase >= desde)
        if hasta is not None:
            query = query.filter(Cancelacion.fecha_clase <= hasta)
        if recientes_primero:
            return query.order_by(Cancelacion.cancelado_en.desc()).all()
        return query.order_by(Cancelacion.fecha_clase).all()

    def contar_cancelaciones_entre(self, desde: date, hasta: date) -> int:
        return (
            self.db.query(func.count(Cancelacion.id_cancelacion))
            .filter(Cancelacion.fecha_clase >= desde, Cancelacion.fecha_clase <= hasta)
            .scalar()
        )

    # ------------------------------------------------------------------
    # Clases de recuperación
    # ------------------------------------------------------------------

    def contar_recuperaciones_en_franja(self, fecha: date, hora_inicio: time, hora_fin: time) -> int:
        return (
            self.db.query(func.count(ClaseRecuperacion.id_recuperacion))
            .filter(
                ClaseRecuperacion.fecha_clase == fecha,
                ClaseRecuperacion.hora_inicio == hora_inicio,
                ClaseRecuperacion.hora_fin == hora_fin,
            )
            .scalar()
        )

    def existe_recuperacion_para(self, id_cancelacion: UUID) -> bool:
        return (
            self.db.query(ClaseRecuperacion.id_recuperacion)
            .filter(ClaseRecuperacion.id_cancelacion_original == id_cancelacion)
            .first()
        ) is not None

    def ids_cancelaciones_recuperadas(self, id_alumno: UUID) -> set[UUID]:
        filas = (
            self.db.query(ClaseRecuperacion.id_cancelacion_original)
            .filter(ClaseRecuperacion.id_alumno == id_alumno)
            .all()
        )
        return {fila[0] for fila in filas}

    def recuperaciones_del_alumno(self, id_alumno: UUID, desde: date | None = None, hasta: date | None = None) -> list[ClaseRecuperacion]:
        query = self.db.query(ClaseRecuperacion).filter(ClaseRecuperacion.id_alumno == id_alumno)
        if desde is not None:
            query = query.filter(ClaseRecuperacion.fecha_clase >= desde)
        if hasta is not None:
            query = query.filter(ClaseRecuperacion.fecha_clase <= hasta)
        return query.order_by(ClaseRecuperacion.fecha_clase, ClaseRecuperacion.hora_inicio).all()

    def contar_recuperaciones_entre(self, desde: date, hasta: date) -> int:
        return (
            self.db.query(func.count(ClaseRecuperacion.id_recuperacion))
            .filter(ClaseRecuperacion.fecha_clase >= desde, ClaseRecuperacion.fecha_clase <= hasta)
            .scalar()
        )

    # ------------------------------------------------------------------

    def agregar(self, entidad):
        self.db.add(entidad)
        self.db.flush()
        return entidad
