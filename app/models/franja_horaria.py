from sqlalchemy import Column, Integer, SmallInteger, Time, Boolean, UniqueConstraint, CheckConstraint
from app.database.base import Base

CAPACIDAD_POR_DEFECTO = 10

class FranjaHoraria(Base):
    """Catálogo de franjas ofertables. No pertenece a ningún alumno."""
    __tablename__ = "franjas_horarias"

    id_franja = Column(Integer, primary_key=True, autoincrement=True)
    dia_semana = Column(SmallInteger, nullable=False)  # 1=Lunes .. 7=Domingo
    hora_inicio = Column(Time, nullable=False)
    hora_fin = Column(Time, nullable=False)
    capacidad_maxima = Column(Integer, nullable=False, default=CAPACIDAD_POR_DEFECTO)
    activo = Column(Boolean, nullable=False, default=True, index=True)

    __table_args__ = (
        UniqueConstraint("dia_semana", "hora_inicio", "hora_fin", name="uq_franjas_dia_horas"),
        CheckConstraint("dia_semana BETWEEN 1 AND 7", name="ck_franjas_dia_semana"),
    )
