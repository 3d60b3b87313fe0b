from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from grading_desk.core.deps import get_current_user, get_db
from grading_desk.models.homework import Homework
from grading_desk.models.user import User
from grading_desk.schemas.homework import HomeworkRead

router = APIRouter()


@router.get("/{homework_id}", response_model=HomeworkRead)
def get_homework(
    homework_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    homework = db.query(Homework).filter(Homework.id == homework_id).first()
    if not homework:
        raise HTTPException(status_code=404, detail="Homework not found")
    return homework
