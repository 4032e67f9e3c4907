"""
Authentication router.
Handles login, registration, session cookie and staff accounts.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from slowapi.util import get_remote_address

from ordo_api.services.domain import StaffService
from ordo_api.services.permissions import (
    RequestContext,
    admin_procedure,
    protected_procedure,
    public_procedure,
)
from ordo_shared.config.settings import settings
from ordo_shared.security.auth import token_ttl_seconds
from ordo_shared.security.rate_limit import limiter
from ordo_shared.utils.schemas import (
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
    StaffCreateRequest,
    StaffOutput,
    StaffUpdateRequest,
    UserInfo,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


# =============================================================================
# Session cookie helpers
# =============================================================================


def set_session_cookie(response: Response, token: str) -> None:
    """
    Set the session token as an HttpOnly cookie.

    - httponly: not readable from JavaScript
    - secure: HTTPS only (configurable for dev)
    - samesite: CSRF protection
    - max_age: matches the token expiry
    """
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=token_ttl_seconds(),
        path="/",
        domain=settings.cookie_domain or None,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        domain=settings.cookie_domain or None,
    )


def _auth_response(user, token: str) -> AuthResponse:
    return AuthResponse(
        token=token,
        expires_in=token_ttl_seconds(),
        user=UserInfo.model_validate(user),
    )


# =============================================================================
# Public endpoints
# =============================================================================


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.login_rate_limit)
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    ctx: RequestContext = Depends(public_procedure),
) -> AuthResponse:
    """
    Authenticate with email and password.

    Returns the session token in the body and sets it as a cookie.
    """
    user, token = StaffService(ctx.db).authenticate(
        body.email, body.password, ip_address=get_remote_address(request)
    )
    set_session_cookie(response, token)
    return _auth_response(user, token)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.register_rate_limit)
def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    ctx: RequestContext = Depends(public_procedure),
) -> AuthResponse:
    """Create a CUSTOMER account and log it in."""
    user, token = StaffService(ctx.db).register(body)
    set_session_cookie(response, token)
    return _auth_response(user, token)


@router.post("/logout", response_model=LogoutResponse)
def logout(response: Response) -> LogoutResponse:
    """Clear the session cookie. Bearer tokens stay valid until they expire."""
    clear_session_cookie(response)
    return LogoutResponse(success=True, message="Logged out")


# =============================================================================
# Authenticated endpoints
# =============================================================================


@router.get("/me", response_model=UserInfo)
def me(ctx: RequestContext = Depends(protected_procedure)) -> UserInfo:
    user = StaffService(ctx.db).get_profile(ctx.user.id)
    return UserInfo.model_validate(user)


@router.post("/staff", response_model=StaffOutput, status_code=status.HTTP_201_CREATED)
def create_staff(
    body: StaffCreateRequest,
    ctx: RequestContext = Depends(admin_procedure),
) -> StaffOutput:
    user = StaffService(ctx.db).create_staff(body, created_by=ctx.user.id)
    return StaffOutput.model_validate(user)


@router.get("/staff", response_model=list[StaffOutput])
def list_staff(ctx: RequestContext = Depends(admin_procedure)) -> list[StaffOutput]:
    """Staff accounts, active first, newest first."""
    return [StaffOutput.model_validate(u) for u in StaffService(ctx.db).list_staff()]


@router.patch("/staff/{user_id}", response_model=StaffOutput)
def update_staff(
    user_id: int,
    body: StaffUpdateRequest,
    ctx: RequestContext = Depends(admin_procedure),
) -> StaffOutput:
    user = StaffService(ctx.db).update_staff(user_id, body, updated_by=ctx.user.id)
    return StaffOutput.model_validate(user)


@router.post("/staff/{user_id}/deactivate", response_model=StaffOutput)
def deactivate_staff(
    user_id: int,
    ctx: RequestContext = Depends(admin_procedure),
) -> StaffOutput:
    user = StaffService(ctx.db).deactivate_staff(user_id, deactivated_by=ctx.user.id)
    return StaffOutput.model_validate(user)
