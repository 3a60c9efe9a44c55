from fastapi import APIRouter
from pydantic import BaseModel, Field

from shortlink.core.modules.link.models import LinkView
from shortlink.web.deps import AppDep, SessionValuesDep
from shortlink.web.openapi import ErrorResponse

router = APIRouter(tags=["links"])


class CreateLinkRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., min_length=1, description="Destination URL; https:// is assumed when no scheme is given")

    model_config = {"json_schema_extra": {"examples": [{"url": "https://example.com/some/long/path"}]}}


@router.post(
    "/links",
    summary="Shorten URL",
    description="Create a short link. With a valid session the link is owned by the current user, otherwise it is anonymous.",
    operation_id="createLink",
    status_code=201,
    responses={
        201: {"description": "Link created"},
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        401: {"model": ErrorResponse, "description": "Session cookie present but invalid"},
    },
)
async def create_link(data: CreateLinkRequest, app: AppDep, session_values: SessionValuesDep) -> LinkView:
    return await app.create_link(session_values, data.url)


@router.get(
    "/links",
    summary="List own links",
    description="Get all links owned by the authenticated user, newest first.",
    operation_id="listLinks",
    responses={
        200: {"description": "List of links"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_links(app: AppDep, session_values: SessionValuesDep) -> list[LinkView]:
    return await app.get_my_links(session_values)


@router.delete(
    "/links/{shortcode}",
    summary="Delete link",
    description="Delete a link. Only the owner or an admin may delete it.",
    operation_id="deleteLink",
    status_code=204,
    responses={
        204: {"description": "Link deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Link belongs to another user"},
        404: {"model": ErrorResponse, "description": "Link not found"},
    },
)
async def delete_link(shortcode: str, app: AppDep, session_values: SessionValuesDep) -> None:
    await app.delete_link(session_values, shortcode)
