from sqlalchemy import create_engine
from dotenv import load_dotenv
from sqlalchemy.orm import sessionmaker

load_dotenv()

from app.core.config import settings

DATABASE_URL = settings.DATABASE_URL

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
	connect_args["check_same_thread"] = False
elif settings.DB_SSLMODE:
	connect_args["sslmode"] = settings.DB_SSLMODE

engine = create_engine(
	DATABASE_URL,
	pool_pre_ping=True,
	connect_args=connect_args
)

# Session factory for dependencies
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Declarative base is in base.py
from .base import Base
