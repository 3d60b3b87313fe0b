from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from grading_desk.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    first_name: Mapped[str | None] = mapped_column(String(255))
    last_name: Mapped[str | None] = mapped_column(String(255))
    # "student" | "parent" | "teacher" | "admin"
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="student")

    submissions = relationship(
        "Submission",
        back_populates="student",
        foreign_keys="Submission.student_id",
        cascade="all, delete-orphan",
    )
