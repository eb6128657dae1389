import argparse
import logging

from app.database.base import Base
from app.database import engine, SessionLocal
from app.database.seed import sembrar_alumnos_demo, sembrar_franjas

import app.models  # noqa: F401  registra las tablas en Base.metadata

logger = logging.getLogger(__name__)

def create_tables():
    Base.metadata.create_all(bind=engine)
    logger.info("Tablas creadas correctamente")

def seed(demo: bool = False):
    db = SessionLocal()
    try:
        sembrar_franjas(db)
        if demo:
            sembrar_alumnos_demo(db)
    finally:
        db.close()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Crea las tablas del portal de clases")
    parser.add_argument("--seed", action="store_true", help="Carga el catálogo de franjas de lunes a viernes")
    parser.add_argument("--demo", action="store_true", help="Con --seed, añade alumnos de demostración")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    create_tables()
    if args.seed:
        seed(demo=args.demo)
