from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from grading_desk.db.session import SessionLocal
from grading_desk.models.user import User


# every request that needs DB will get a fresh session, and it will always close.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    x_user_id: int | None = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the caller from the id forwarded by the upstream gateway.

    Authentication happens before requests reach this service; we only
    look the id up and reject callers we do not know.
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )

    user = db.query(User).filter(User.id == x_user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )
    return user
