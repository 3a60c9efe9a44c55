from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from shortlink.web.deps import AppDep
from shortlink.web.openapi import ErrorResponse

router = APIRouter(tags=["redirect"])


@router.get(
    "/{shortcode}",
    summary="Follow short link",
    description="Redirect to the destination of a short link and count the click.",
    operation_id="followLink",
    response_class=RedirectResponse,
    status_code=302,
    responses={
        302: {"description": "Redirect to the destination URL"},
        404: {"model": ErrorResponse, "description": "Link not found"},
    },
)
async def follow_link(shortcode: str, app: AppDep) -> RedirectResponse:
    url = await app.resolve_shortcode(shortcode)
    return RedirectResponse(url, status_code=302)
