import uuid
from sqlalchemy import Column, DateTime, Time, SmallInteger, Boolean, ForeignKey, Index, CheckConstraint, Uuid
from sqlalchemy.sql import func
from app.database.base import Base

class Horario(Base):
    """Reserva semanal fija de un alumno (día + franja)."""
    __tablename__ = "horarios"

    id_horario = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    id_alumno = Column(Uuid(as_uuid=True), ForeignKey("alumnos.id_alumno", ondelete="CASCADE"), nullable=False)

    dia_semana = Column(SmallInteger, nullable=False)  # 1=Lunes .. 7=Domingo
    hora_inicio = Column(Time, nullable=False)
    hora_fin = Column(Time, nullable=False)
    activo = Column(Boolean, nullable=False, default=True)
    desactivado_en = Column(DateTime(timezone=True), nullable=True)  # misma marca para todos los de una baja

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("dia_semana BETWEEN 1 AND 7", name="ck_horarios_dia_semana"),
        Index("ix_horarios_alumno_dia_activo", "id_alumno", "dia_semana", "activo"),
        Index("ix_horarios_franja", "dia_semana", "hora_inicio", "hora_fin"),
    )
