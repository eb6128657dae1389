import functools
import logging

from app.core.errors import ErrorDominio
from app.schemas.respuesta import RespuestaApi

logger = logging.getLogger(__name__)


def operacion(mensaje_exito: str):
    """
    Frontera del motor: el resultado de la función se envuelve en una
    RespuestaApi correcta y cualquier ErrorDominio en una RespuestaApi fallida.

    Los errores del almacén (SQLAlchemyError) no se capturan aquí: se propagan
    y la aplicación los responde como StoreFailure.
    La función original queda accesible en `__wrapped__`.
    """
    def decorador(func):
        @functools.wraps(func)
        def envoltura(*args, **kwargs) -> RespuestaApi:
            try:
                resultado = func(*args, **kwargs)
            except ErrorDominio as error:
                logger.warning("%s rechazada [%s]: %s", func.__name__, error.codigo, error.mensaje)
                return RespuestaApi.fallo(error)
            return RespuestaApi.ok(resultado, mensaje_exito)
        return envoltura
    return decorador
