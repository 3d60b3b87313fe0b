from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from grading_desk.db.base_class import Base


class Homework(Base):
    __tablename__ = "homeworks"

    id = Column(Integer, primary_key=True, index=True)
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    due_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(20), nullable=False, default="draft")  # "draft" | "published"

    # display names, e.g. "Communication", "Critical Thinking"
    core_competencies = Column(JSON, nullable=False, default=list)

    rubric_emerging = Column(Text, nullable=False, default="")
    rubric_developing = Column(Text, nullable=False, default="")
    rubric_proficient = Column(Text, nullable=False, default="")
    rubric_extending = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    submissions = relationship("Submission", back_populates="homework", cascade="all, delete-orphan")
