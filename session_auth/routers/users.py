"""Current user endpoint."""
from fastapi import APIRouter, Depends

from session_auth.dependencies.auth import get_current_user
from session_auth.schemas.auth import LoginUser

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/current", response_model=LoginUser)
async def get_current(current_user: LoginUser = Depends(get_current_user)):
    return current_user
