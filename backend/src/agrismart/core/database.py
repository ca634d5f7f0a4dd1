"""
Database — Fabrique d'engine et de sessions SQLAlchemy.

Aucun état global ici : l'engine est créé au startup par le store
(voir services/db_handler.py) et fermé au shutdown.

Usage:
    from agrismart.core.database import create_db_engine, create_session_factory
"""

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def _is_memory_sqlite(database_url: str) -> bool:
    return _is_sqlite(database_url) and (
        database_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in database_url
    )


def create_db_engine(database_url: str) -> Engine:
    """
    Crée l'engine SQLAlchemy.

    SQLite : `check_same_thread=False` car FastAPI exécute les routes sync
    dans un thread pool ; une base en mémoire partage une seule connexion
    (StaticPool) sinon chaque connexion verrait une base vide.
    La contrainte crops ↔ tasks est déclarée mais pas vérifiée
    (PRAGMA foreign_keys=OFF épinglé à chaque connexion).
    """
    if not database_url:
        raise ValueError("DATABASE_URL non configurée.")

    if _is_sqlite(database_url):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(database_url):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn, _record):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=OFF")
            cur.close()
    else:
        engine = create_engine(database_url, pool_pre_ping=True)

    logger.info("✅ Database engine initialisé (%s).", engine.url.get_backend_name())
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def check_connection(engine: Engine) -> bool:
    """Vérifie que la base est accessible."""
    if engine is None:
        return False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("DB health check échoué: %s", e)
        return False
