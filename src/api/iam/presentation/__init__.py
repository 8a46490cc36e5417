"""IAM presentation layer - aggregate-based organization.

Organizes presentation concerns by use case (auth, users, invitations)
following vertical slicing. Each package contains its own routes and models.
"""

from __future__ import annotations

from fastapi import APIRouter

from iam.presentation.auth.routes import router as auth_router
from iam.presentation.invitations.routes import router as invitations_router
from iam.presentation.users.routes import router as users_router

# Auth is enforced per-endpoint (each handler declares its own Depends),
# since signup, login and invitation redemption are public.
router = APIRouter()

router.include_router(auth_router)
router.include_router(users_router)
router.include_router(invitations_router)

__all__ = ["router"]
