from fastapi import APIRouter

from shortlink.core.modules.user.models import ProfileView
from shortlink.web.deps import AppDep, SessionValuesDep
from shortlink.web.openapi import ErrorResponse

router = APIRouter(tags=["profile"])


@router.get(
    "/profile",
    summary="Current user",
    description="Account of the session user, with the number of links they own and their total clicks.",
    operation_id="getProfile",
    responses={
        200: {"description": "Profile of the session user"},
        401: {"model": ErrorResponse, "description": "Missing, invalid or expired session"},
    },
)
async def get_profile(app: AppDep, session_values: SessionValuesDep) -> ProfileView:
    return await app.get_current_user(session_values)
