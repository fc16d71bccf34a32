import logging
import threading
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from spirit_shorts import config

logger = logging.getLogger(__name__)

Base = declarative_base()

SessionLocal = sessionmaker(autocommit=False, autoflush=False)

# Motor compartido, se crea bajo demanda
engine: Optional[Engine] = None
_engine_lock = threading.Lock()

PLACEHOLDER_STORE_URL = "sqlite://"


def _build_engine(url: Optional[str], key: Optional[str]) -> Engine:
    """
    Crea el motor del almacén. Sin URL se usa un SQLite en memoria
    para que la aplicación arranque igualmente.
    """
    if not url:
        logger.warning("Credenciales del almacén ausentes (DATABASE_URL, SUPABASE_DB_URL); usando almacén en memoria")
        return create_engine(
            PLACEHOLDER_STORE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )

    store_url = make_url(url)
    if key and not store_url.password:
        store_url = store_url.set(password=key)
    logger.info(f"Almacén configurado en {store_url.host or store_url.drivername}")
    return create_engine(store_url, pool_pre_ping=True)


def get_engine() -> Engine:
    global engine
    if engine is None:
        with _engine_lock:
            if engine is None:
                new_engine = _build_engine(config.STORE_URL, config.STORE_KEY)
                SessionLocal.configure(bind=new_engine)
                # Registrar los modelos antes de crear las tablas
                from spirit_shorts.models import videos  # noqa: F401
                Base.metadata.create_all(bind=new_engine)
                engine = new_engine
    return engine


def reset_engine():
    """Cierra el motor actual; el siguiente uso vuelve a leer la configuración."""
    global engine
    with _engine_lock:
        if engine is not None:
            engine.dispose()
        engine = None


def get_session() -> Session:
    get_engine()
    return SessionLocal()
