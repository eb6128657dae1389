from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from app.core.security import decode_access_token
from app.schemas.auth import UsuarioActual

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

def get_usuario_actual(token: str = Depends(oauth2_scheme)) -> UsuarioActual:
    try:
        payload = decode_access_token(token)
        dni: str | None = payload.get("sub")

        if dni is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token invalido"
            )

        return UsuarioActual(
            dni=dni,
            nombre=payload.get("nombre") or "",
            es_admin=bool(payload.get("es_admin")),
            id_alumno=payload.get("id_alumno"),
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalido o expirado"
        )


def requiere_admin(usuario: UsuarioActual = Depends(get_usuario_actual)) -> UsuarioActual:
    if not usuario.es_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Se requieren permisos de administrador"
        )
    return usuario


def get_id_alumno_actual(usuario: UsuarioActual = Depends(get_usuario_actual)) -> UUID:
    """Id del alumno autenticado, para las rutas "mi-..." """
    if not usuario.id_alumno:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="El usuario no es un alumno"
        )
    return UUID(usuario.id_alumno)


def verificar_acceso_alumno(usuario: UsuarioActual, id_alumno: UUID) -> None:
    # El administrador actúa por cualquier alumno; un alumno sólo por sí mismo
    if usuario.es_admin:
        return
    if usuario.id_alumno is None or UUID(usuario.id_alumno) != id_alumno:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No tienes permisos para acceder a este alumno"
        )
