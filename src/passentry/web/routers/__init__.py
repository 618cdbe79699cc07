from passentry.web.routers.auth import router as auth_router
from passentry.web.routers.entry import api_router as entry_api_router
from passentry.web.routers.entry import router as entry_router
from passentry.web.routers.profile import router as profile_router
from passentry.web.routers.users import router as users_router

__all__ = [
    "auth_router",
    "entry_api_router",
    "entry_router",
    "profile_router",
    "users_router",
]
