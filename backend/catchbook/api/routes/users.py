"""Profile of the single user every request acts for."""
from fastapi import APIRouter, Depends

from catchbook.api.deps import get_current_user
from catchbook.schemas.records import User

router = APIRouter()


@router.get("/user", response_model=User)
def me(current_user: User = Depends(get_current_user)):
    return current_user
