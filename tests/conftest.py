import os
from datetime import datetime, timedelta, timezone

TEST_DB_FILE = "test_grading_desk.db"
# must be set before grading_desk.db.session creates its engine
os.environ["GRADING_DESK_DATABASE_URL"] = f"sqlite:///./{TEST_DB_FILE}"

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from grading_desk.db.base import Base  # noqa: E402
from grading_desk.db.session import SessionLocal, engine  # noqa: E402
from grading_desk.grading.client import GradingServiceClient  # noqa: E402
from grading_desk.main import app  # noqa: E402
from grading_desk.models.homework import Homework  # noqa: E402
from grading_desk.models.submission import Submission  # noqa: E402
from grading_desk.models.user import User  # noqa: E402

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed(setup_test_db):
    """Seed a clean dataset for each test and return the ids tests need."""
    db = SessionLocal()
    try:
        # Clear tables (child -> parent)
        db.query(Submission).delete()
        db.query(Homework).delete()
        db.query(User).delete()
        db.commit()

        teacher = User(email="teacher1@example.com", first_name="Tess", last_name="Teacher", role="teacher")
        parent = User(email="parent1@example.com", first_name="Pat", last_name="Parent", role="parent")
        students = [
            User(email=f"student{i}@example.com", first_name=f"Student{i}", last_name="Lee", role="student")
            for i in (1, 2, 3)
        ]
        db.add_all([teacher, parent, *students])
        db.commit()

        homework = Homework(
            uploaded_by=teacher.id,
            title="Telling Time",
            description="Read the clock and draw the hands.",
            due_at=NOW + timedelta(days=3),
            status="published",
            core_competencies=["Communication", "Critical Thinking", "Personal Responsibility"],
            rubric_emerging="Reads the hour hand only.",
            rubric_developing="Reads hours and half hours.",
            rubric_proficient="Reads to the nearest five minutes.",
            rubric_extending="Reads to the minute and explains.",
        )
        db.add(homework)
        db.commit()

        # ungraded, pdf listed after an image
        fresh = Submission(
            homework_id=homework.id,
            student_id=students[0].id,
            submitted_files=[
                {"s3_key": "submissions/original/1/clock.png", "file_name": "clock.png", "file_type": "image/png", "size": 2048},
                {"s3_key": "submissions/flattened/1/worksheet.pdf", "file_name": "worksheet.pdf", "file_type": "application/pdf", "size": 9000},
            ],
            submitted_at=NOW - timedelta(hours=1),
            submission_status="submitted",
            updated_at=NOW - timedelta(hours=1),
        )
        # already graded
        graded = Submission(
            homework_id=homework.id,
            student_id=students[1].id,
            submitted_files=[
                {"s3_key": "submissions/original/2/notes.docx", "file_name": "notes.docx", "size": 100},
            ],
            submitted_at=NOW - timedelta(days=1),
            submission_status="graded",
            is_locked=True,
            score=72,
            letter_grade="Developing",
            rubric_scores={"communication": 70, "criticalThinking": 75},
            feedback="<p>Check the minute hand.</p>",
            graded_by=teacher.id,
            graded_at=NOW - timedelta(hours=20),
            updated_at=NOW - timedelta(hours=20),
        )
        # graded by letter only, no files
        legacy = Submission(
            homework_id=homework.id,
            student_id=students[2].id,
            submitted_files=[],
            submitted_at=NOW - timedelta(days=2),
            submission_status="graded",
            letter_grade="Proficient",
            graded_by=teacher.id,
            graded_at=NOW - timedelta(days=2),
            updated_at=NOW - timedelta(days=2),
        )
        db.add_all([fresh, graded, legacy])
        db.commit()

        yield {
            "teacher": teacher.id,
            "parent": parent.id,
            "students": [s.id for s in students],
            "homework": homework.id,
            "fresh": fresh.id,
            "graded": graded.id,
            "legacy": legacy.id,
        }
    finally:
        db.close()


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
async def service(seed, anyio_backend):
    """Grading client logged in as the teacher, talking to the app in-process."""
    transport = httpx.ASGITransport(app=app)
    async with GradingServiceClient("http://testserver", user_id=seed["teacher"], transport=transport) as c:
        yield c
