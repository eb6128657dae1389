import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.errors import EntradaInvalida, ErrorDominio
from app.database import engine
from app.routes.alumnos import router as alumnos_router
from app.routes.auth import router as auth_router
from app.routes.calendario import router as calendario_router
from app.routes.respuestas import responder
from app.schemas.respuesta import RespuestaApi

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Verifica conexión a BD al iniciar.
    Un fallo se registra pero no impide arrancar.
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("DB connection OK")
    except SQLAlchemyError:
        logger.exception("Failed to connect to DB")

    yield

app = FastAPI(title="Portal de clases", lifespan=lifespan)

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
# Orígenes permitidos en ALLOWED_ORIGINS (ver app/core/config.py).
# Evita "*" cuando allow_credentials=True.
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "X-Requested-With",
        "Accept",
        "Origin",
        "Access-Control-Request-Method",
        "Access-Control-Request-Headers",
    ],
)

app.include_router(auth_router)
app.include_router(alumnos_router)
app.include_router(calendario_router)


# ---------------------------------------------------------------------------
# Errores
# ---------------------------------------------------------------------------

@app.exception_handler(SQLAlchemyError)
async def error_almacen(request: Request, exc: SQLAlchemyError):
    logger.error("Error de base de datos en %s %s", request.method, request.url.path, exc_info=exc)
    return responder(RespuestaApi.fallo(ErrorDominio("Error al acceder a la base de datos")))


@app.exception_handler(RequestValidationError)
async def error_validacion(request: Request, exc: RequestValidationError):
    errores = [
        f"{'.'.join(str(parte) for parte in error['loc'] if parte != 'body')}: {error['msg']}"
        for error in exc.errors()
    ]
    return responder(RespuestaApi.fallo(EntradaInvalida(errores=errores)))


@app.get("/help")
def help_endpoint():
    return {
        "status": "ok",
        "routes": ["/auth", "/alumnos", "/calendario", "/help", "/docs"],
        "endpoints": {
            "/calendario/cancelar-clase": {
                "POST": {
                    "description": "Cancela la clase de una fecha con al menos 24 horas de antelación",
                    "body": {"fecha_clase": "YYYY-MM-DD", "id_horario_original": "uuid", "motivo": "(opcional)"},
                    "headers": {"Authorization": "Bearer {token}"}
                }
            },
            "/calendario/reservar-recuperacion": {
                "POST": {
                    "description": "Reserva una clase de recuperación a cuenta de una cancelación",
                    "body": {
                        "fecha_clase": "YYYY-MM-DD",
                        "hora_inicio": "HH:MM",
                        "hora_fin": "HH:MM",
                        "id_cancelacion_original": "uuid"
                    },
                    "headers": {"Authorization": "Bearer {token}"}
                }
            }
        }
    }
