"""Auth API — login, current principal, password reset.

Learn: Routes for the credential lifecycle:
- POST /auth/login → email/password → session token + principal projection
- GET /auth/me → current principal
- POST /auth/forgot-password → issue a reset token, mail the link
- POST /auth/reset-password → redeem the token, set the new password

Reset mail goes out through BackgroundTasks after the response is sent.
"""

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from peoplehub.auth.dependencies import get_current_principal
from peoplehub.auth.policy import Principal
from peoplehub.db.engine import get_db
from peoplehub.errors import NotFound
from peoplehub.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PrincipalRead,
    ResetPasswordRequest,
)
from peoplehub.services.auth_service import AuthService
from peoplehub.services.mailer import Mailer, get_mailer
from peoplehub.services.password_reset import PasswordResetService
from peoplehub.stores.credentials import CredentialStore

router = APIRouter(prefix="/auth")


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with email and password → session token."""
    result = await AuthService(db).login(body.email, body.password)
    user = result.user
    return LoginResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        company=user.company_id,
        token=result.token,
    )


# ─── Current principal ──────────────────────────────────


@router.get("/me", response_model=PrincipalRead)
async def get_me(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's info."""
    user = await CredentialStore(db).get(principal.user_id)
    if not user:
        raise NotFound("User not found")
    return PrincipalRead(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        company=user.company_id,
    )


# ─── Password reset ─────────────────────────────────────


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    """Request a reset link. Same answer whether or not the email exists."""
    message = await PasswordResetService(db).request_reset(body.email)
    if message is not None:
        background_tasks.add_task(mailer.deliver, message)
    return MessageResponse(
        message="If an account exists for that email, a reset link has been sent"
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(body: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    """Redeem a reset token. Each token works once, before it expires."""
    await PasswordResetService(db).redeem_reset(body.token, body.password)
    return MessageResponse(message="Password reset successful")
