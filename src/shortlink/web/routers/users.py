from fastapi import APIRouter

from shortlink.web.deps import AppDep, SessionValuesDep
from shortlink.web.openapi import ErrorResponse

router = APIRouter(tags=["users"])


@router.delete(
    "/users/{user_id}",
    summary="Delete user",
    description="Delete a user account and end all of its sessions. Links the user created stay resolvable. Admin only.",
    operation_id="deleteUser",
    status_code=204,
    responses={
        204: {"description": "User deleted successfully"},
        400: {"model": ErrorResponse, "description": "Cannot delete yourself"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def delete_user(user_id: int, app: AppDep, session_values: SessionValuesDep) -> None:
    await app.delete_user(session_values, user_id)
