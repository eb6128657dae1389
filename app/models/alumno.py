import uuid
from sqlalchemy import Column, DateTime, String, Boolean, Uuid
from sqlalchemy.sql import func
from app.database.base import Base

class Alumno(Base):
    __tablename__ = "alumnos"

    id_alumno = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    nombre = Column(String(255), nullable=False)
    dni = Column(String(9), unique=True, nullable=False)  # normalizado: trim + mayúsculas
    email = Column(String(255))
    telefono = Column(String(20))
    activo = Column(Boolean, nullable=False, default=True, index=True)  # baja lógica

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
