from typing import Generic, TypeVar

from fastapi import status
from pydantic import BaseModel, PrivateAttr

from app.core.errors import ErrorDominio

T = TypeVar("T")


class RespuestaApi(BaseModel, Generic[T]):
    """Envoltorio uniforme de todas las operaciones del motor"""
    success: bool
    message: str = ""
    data: T | None = None
    errors: list[str] | None = None
    code: str | None = None

    _http_status: int = PrivateAttr(default=status.HTTP_200_OK)

    @classmethod
    def ok(cls, data=None, message: str = "Operación realizada correctamente") -> "RespuestaApi":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fallo(cls, error: ErrorDominio) -> "RespuestaApi":
        respuesta = cls(
            success=False,
            message=error.mensaje,
            errors=error.errores or None,
            code=error.codigo,
        )
        respuesta._http_status = error.http_status
        return respuesta

    @property
    def http_status(self) -> int:
        return self._http_status

    def a_json(self) -> dict:
        # Sólo se omiten las claves opcionales del sobre, no las de `data`
        contenido = self.model_dump(mode="json")
        return {clave: valor for clave, valor in contenido.items() if valor is not None}

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "message": "La clase de esa fecha ya está cancelada",
                "code": "AlreadyCancelled"
            }
        }
