from app.core.reloj import Reloj, RelojSistema

_reloj = RelojSistema()


def get_reloj() -> Reloj:
    """Reloj de la aplicación; los tests lo sustituyen por un RelojFijo"""
    return _reloj
