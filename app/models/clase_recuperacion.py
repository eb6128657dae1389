import uuid
from sqlalchemy import Column, Date, DateTime, Time, ForeignKey, Index, Uuid
from sqlalchemy.sql import func
from app.database.base import Base

class ClaseRecuperacion(Base):
    __tablename__ = "clases_recuperacion"

    id_recuperacion = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    id_alumno = Column(Uuid(as_uuid=True), ForeignKey("alumnos.id_alumno", ondelete="CASCADE"), nullable=False)
    # 1:1 con la cancelación que consume
    id_cancelacion_original = Column(Uuid(as_uuid=True), ForeignKey("cancelaciones.id_cancelacion", ondelete="RESTRICT"), unique=True, nullable=False)

    fecha_clase = Column(Date, nullable=False)
    hora_inicio = Column(Time, nullable=False)
    hora_fin = Column(Time, nullable=False)
    reservado_en = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_recuperaciones_alumno_fecha", "id_alumno", "fecha_clase"),
        Index("ix_recuperaciones_franja", "fecha_clase", "hora_inicio", "hora_fin"),
    )
