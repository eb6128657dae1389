from datetime import datetime, timedelta, timezone
import uuid

from jose import jwt

from app.core.config import settings


def create_access_token(dni: str, nombre: str, es_admin: bool, id_alumno: str | None = None) -> tuple[str, datetime]:
    ahora = datetime.now(timezone.utc)
    expire = ahora + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": dni,
        "nombre": nombre,
        "es_admin": es_admin,
        "id_alumno": str(id_alumno) if id_alumno else None,
        "jti": str(uuid.uuid4()),
        "iat": int(ahora.timestamp()),
        "exp": expire,
    }
    token = jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token, expire


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
