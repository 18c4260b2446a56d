"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without modifying individual handlers. Health, auth and invitation
acceptance are open; auth/me resolves its own principal.
"""

from fastapi import APIRouter, Depends

from peoplehub.api.auth import router as auth_router
from peoplehub.api.companies import invitations_router
from peoplehub.api.companies import router as companies_router
from peoplehub.api.health import router as health_router
from peoplehub.api.leaves import router as leaves_router
from peoplehub.api.staff import router as staff_router
from peoplehub.api.users import router as users_router
from peoplehub.auth.dependencies import get_current_principal

# All protected routers require authentication
_auth = [Depends(get_current_principal)]

api_router = APIRouter(prefix="/api/v1")

# Open routes: no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(invitations_router, tags=["companies"])

# Protected routes: require a valid session token
api_router.include_router(companies_router, tags=["companies"], dependencies=_auth)
api_router.include_router(users_router, tags=["users"], dependencies=_auth)
api_router.include_router(staff_router, tags=["employees", "service-managers"], dependencies=_auth)
api_router.include_router(leaves_router, tags=["leaves"], dependencies=_auth)
