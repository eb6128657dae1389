import uuid
from sqlalchemy import Column, Date, DateTime, String, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.sql import func
from app.database.base import Base

class Cancelacion(Base):
    __tablename__ = "cancelaciones"

    id_cancelacion = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    id_alumno = Column(Uuid(as_uuid=True), ForeignKey("alumnos.id_alumno", ondelete="CASCADE"), nullable=False)
    id_horario_original = Column(Uuid(as_uuid=True), ForeignKey("horarios.id_horario", ondelete="RESTRICT"), nullable=False)

    fecha_clase = Column(Date, nullable=False, index=True)
    motivo = Column(String(500))
    cancelado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Una sola cancelación por alumno y fecha
    __table_args__ = (
        UniqueConstraint("id_alumno", "fecha_clase", name="uq_cancelaciones_alumno_fecha"),
    )
