from shortlink.web.routers.auth import router as auth_router
from shortlink.web.routers.links import router as links_router
from shortlink.web.routers.profile import router as profile_router
from shortlink.web.routers.redirect import router as redirect_router
from shortlink.web.routers.users import router as users_router

__all__ = [
    "auth_router",
    "links_router",
    "profile_router",
    "redirect_router",
    "users_router",
]
