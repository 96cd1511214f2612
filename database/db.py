"""
Configuración base de SQLAlchemy para la aplicación.

Define `engine`, fábrica de sesiones (`SessionLocal`), la clase base
declarativa para los modelos ORM y la dependencia `get_db` de FastAPI.
"""
# database/db.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config.settings import settings

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL


def build_engine(url: str):
    """Crea un engine; SQLite necesita compartir conexiones entre hilos."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


engine = build_engine(SQLALCHEMY_DATABASE_URL)


def make_session_factory(bind):
    """Fábrica de sesiones; los objetos siguen legibles tras commit y close."""
    return sessionmaker(bind=bind, autocommit=False, autoflush=False, expire_on_commit=False)


SessionLocal = make_session_factory(engine)

Base = declarative_base()


def init_db(bind=None) -> None:
    """Crea las tablas que falten (no hay migraciones)."""
    # importa los modelos para registrarlos en Base.metadata
    from database import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)


def get_db():
    """Dependencia de FastAPI: entrega una sesión de BD y la cierra al final."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
