from fastapi import Depends, HTTPException, status

from grading_desk.core.deps import get_current_user
from grading_desk.models.user import User

GRADER_ROLES = ("teacher", "admin")


def require_grader(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role not in GRADER_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only teachers and admins can grade submissions",
        )
    return current_user
