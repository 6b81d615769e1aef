"""Authentication router package: local account, session and OAuth endpoints."""

from fastapi import APIRouter

from .routes import account as account_route
from .routes import activity as activity_route
from .routes import me as me_route
from .routes import oauth as oauth_route
from .routes import password as password_route
from .routes import sign_in as sign_in_route
from .routes import sign_out as sign_out_route
from .routes import sign_up as sign_up_route

router = APIRouter(prefix="/auth", tags=["auth"])

# Delegate to sub-routers ----------------------------------------------------

router.include_router(sign_up_route.router, prefix="/sign-up")
router.include_router(sign_in_route.router, prefix="/sign-in")
router.include_router(sign_out_route.router, prefix="/sign-out")
router.include_router(password_route.router, prefix="/password")
router.include_router(account_route.router, prefix="/account")
router.include_router(me_route.router, prefix="/me")
router.include_router(activity_route.router, prefix="/activity")
router.include_router(oauth_route.router, prefix="/oauth")

oauth_callback_router = oauth_route.callback_router

__all__ = ["router", "oauth_callback_router"]
