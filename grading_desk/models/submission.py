from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from grading_desk.db.base_class import Base


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)

    homework_id = Column(Integer, ForeignKey("homeworks.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # [{"s3_key", "file_name", "file_type", "size"}, ...] in upload order
    submitted_files = Column(JSON, nullable=False, default=list)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    submission_status = Column(String(20), nullable=False, default="assigned")  # "assigned" | "submitted" | "graded"
    is_locked = Column(Boolean, nullable=False, default=False)

    # Grading fields (nullable until graded)
    score = Column(Integer, nullable=True)
    letter_grade = Column(String(20), nullable=True)
    rubric_scores = Column(JSON, nullable=True)
    feedback = Column(Text, nullable=True)
    graded_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    graded_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("homework_id", "student_id", name="uq_submission_homework_student"),
    )

    homework = relationship("Homework", back_populates="submissions")
    student = relationship("User", back_populates="submissions", foreign_keys=[student_id])
