from grading_desk.db.base_class import Base

# import models so SQLAlchemy registers them on Base.metadata
from grading_desk.models import homework, submission, user  # noqa: F401
