import logging

from grading_desk.db.base import Base
from grading_desk.db.session import engine

logger = logging.getLogger(__name__)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("database schema ready at %s", engine.url)
