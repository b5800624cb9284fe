# =============================================================
# 🗄️ DATABASE — Configuration SQLModel (Bibliothèque)
# =============================================================
import logging
import time

from sqlalchemy import text
from sqlmodel import SQLModel, Session, create_engine

from config import DATABASE_URL

logger = logging.getLogger("uvicorn")


def _normalize_pg_url(url: str) -> str:
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg2://", 1)
    return url


ENGINE_KW = {"pool_pre_ping": True, "pool_recycle": 1800}


def engine_options(url: str) -> tuple:
    """URL normalisée et arguments de create_engine selon le dialecte."""
    kwargs = dict(ENGINE_KW)
    if "postgres" in url:
        return _normalize_pg_url(url), kwargs
    if url.startswith("sqlite"):
        # Sessions ouvertes dans le pool de threads de FastAPI
        kwargs["connect_args"] = {"check_same_thread": False}
    return url, kwargs


# Création du moteur
_url, _kwargs = engine_options(DATABASE_URL)
engine = create_engine(_url, **_kwargs)


def init_db_with_retry(max_attempts: int = 12, delay_sec: int = 5) -> bool:
    """Essaye plusieurs connexions avant de créer les tables."""
    # Les tables doivent être enregistrées dans les métadonnées
    import models  # noqa: F401

    for attempt in range(1, max_attempts + 1):
        try:
            with engine.begin() as conn:
                conn.execute(text("SELECT 1"))
                SQLModel.metadata.create_all(bind=conn)
            logger.info(f"✅ Database ready (attempt {attempt}/{max_attempts}).")
            return True
        except Exception as e:
            logger.warning(f"⚠️ DB not ready (attempt {attempt}/{max_attempts}): {e}")
            time.sleep(delay_sec)
    logger.error(f"❌ Database still unreachable after {max_attempts} attempts.")
    return False


def get_session():
    with Session(engine) as session:
        yield session
