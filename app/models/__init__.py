# Importar modelos en orden de dependencias
# Los modelos sin dependencias primero, luego los que dependen de ellos

from app.models.franja_horaria import FranjaHoraria
from app.models.alumno import Alumno
from app.models.horario import Horario
from app.models.cancelacion import Cancelacion
from app.models.clase_recuperacion import ClaseRecuperacion

__all__ = [
    "FranjaHoraria",
    "Alumno",
    "Horario",
    "Cancelacion",
    "ClaseRecuperacion",
]
