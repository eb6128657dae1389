from uuid import UUID

from sqlalchemy.orm import Session

from app.models.alumno import Alumno


class AlumnoRepository:
    """Acceso a alumnos. El filtro de baja lógica es obligatorio en cada consulta."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self, *, solo_activos: bool):
        query = self.db.query(Alumno)
        if solo_activos:
            query = query.filter(Alumno.activo == True)
        return query

    def obtener(self, id_alumno: UUID, *, solo_activos: bool) -> Alumno | None:
        return self._query(solo_activos=solo_activos).filter(Alumno.id_alumno == id_alumno).first()

    def obtener_por_dni(self, dni: str, *, solo_activos: bool) -> Alumno | None:
        return self._query(solo_activos=solo_activos).filter(Alumno.dni == dni).first()

    def listar(self, *, solo_activos: bool) -> list[Alumno]:
        return self._query(solo_activos=solo_activos).order_by(Alumno.nombre).all()

    def agregar(self, alumno: Alumno) -> Alumno:
        self.db.add(alumno)
        self.db.flush()  # Para obtener el id_alumno generado
        return alumno
