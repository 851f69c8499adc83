"""Generate database session"""

import logging
from typing import Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings, get_settings
from src.core.log_setup import configure_logging
from src.db.schema import Base

logger = logging.getLogger(__name__)


def build_engine(settings: Optional[Settings] = None) -> Engine:
    """Engine for the configured database. All tables are created if missing."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    engine = create_engine(settings.database_url, echo=settings.echo_sql)

    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine)


def get_db(session_factory: Optional[sessionmaker[Session]] = None) -> Generator[Session, None, None]:
    session_factory = session_factory or build_session_factory(build_engine())
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
