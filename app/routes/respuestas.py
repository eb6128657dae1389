from fastapi import status
from fastapi.responses import JSONResponse

from app.schemas.respuesta import RespuestaApi


def responder(respuesta: RespuestaApi, status_exito: int = status.HTTP_200_OK) -> JSONResponse:
    """Traduce la RespuestaApi del motor a HTTP: el código sale del tipo de error"""
    codigo = status_exito if respuesta.success else respuesta.http_status
    return JSONResponse(status_code=codigo, content=respuesta.a_json())
