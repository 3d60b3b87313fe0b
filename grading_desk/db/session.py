from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from grading_desk.core.config import DATABASE_URL

# SQLite connections are shared with the threadpool FastAPI runs sync routes on
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)
