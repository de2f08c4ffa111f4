"""
Example of a route guarded by the session token dependency.
"""

from fastapi import APIRouter, Depends

from certificate_registry_api.app.core.security import CurrentUser, get_current_user
from certificate_registry_api.app.schemas.user import Message

router = APIRouter()


@router.get("/protected", response_model=Message)
async def protected_route(current_user: CurrentUser = Depends(get_current_user)) -> Message:
    return Message(message="This is a protected route")
