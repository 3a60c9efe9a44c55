from typing import Annotated, Any, cast

from fastapi import Depends, Request

from shortlink.app import App


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_session_values(request: Request) -> dict[str, Any]:
    """Outward session token values from the signed session cookie.

    Validation against the store happens in the App facade.
    """
    return dict(request.session)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
SessionValuesDep = Annotated[dict[str, Any], Depends(get_session_values)]
