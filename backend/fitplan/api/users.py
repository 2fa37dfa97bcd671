from fastapi import APIRouter, Depends

from fitplan.api.auth import get_current_user
from fitplan.models.user import User
from fitplan.schemas.user import MeResponse, UserResponse

router = APIRouter(tags=["users"])


# GET - Get current user
@router.get("/me", response_model=MeResponse)
def read_me(current_user: User = Depends(get_current_user)):
    return {"user": UserResponse.model_validate(current_user)}
