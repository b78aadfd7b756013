"""Authentication and account endpoints."""

import secrets

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import (
    Principal,
    bind_principal,
    create_access_token,
    get_current_principal,
    hash_password,
    verify_password,
)
from core.database import get_session
from core.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    UserNotFoundError,
    ValidationError,
)
from core.logging import get_logger
from core.password_strength import password_strength_tips
from core.patching import build_assignments
from core.schemas import MessageResponse
from core.two_factor import generate_secret, provisioning_uri, verify_code
from domain.audit.repository import TransactionLogRepository
from domain.audit.schemas import LoginHistoryItem, LoginHistoryResponse
from domain.product.models import RiskLevel
from domain.user.models import User
from domain.user.repository import UserRepository
from domain.user.schemas import (
    PROFILE_COLUMNS,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    PasswordResetRequest,
    PasswordResetResponse,
    PreferencesRequest,
    PreferencesResponse,
    PreferencesSavedResponse,
    ProfilePatch,
    ProfileResponse,
    SignupRequest,
    SignupResponse,
    TwoFactorCodeRequest,
    TwoFactorSetupResponse,
    TwoFactorStatusResponse,
    UserSummary,
)

logger = get_logger(__name__)
router = APIRouter()

PASSWORD_RESET_HINT = "Use a passphrase with numbers and symbols for better security."


async def _load_user(users: UserRepository, principal: Principal) -> User:
    user = await users.get_by_id(principal.user_id)
    if user is None:
        raise UserNotFoundError()
    return user


# ========== Sign up / log in ==========
@router.post("/signup", response_model=SignupResponse)
async def signup(
    request: SignupRequest,
    http_request: Request,
    session: AsyncSession = Depends(get_session),
):
    """Register a new user and log them in."""
    users = UserRepository(session)
    if await users.get_by_email(request.email):
        raise EmailAlreadyRegisteredError()

    user = User(
        email=request.email,
        password_hash=await run_in_threadpool(hash_password, request.password),
        first_name=request.first_name,
        last_name=request.last_name,
        risk_appetite=request.risk_appetite or RiskLevel.moderate,
    )
    try:
        user = await users.create(user)
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        raise EmailAlreadyRegisteredError()

    bind_principal(http_request, Principal(user_id=user.id, email=user.email))

    return SignupResponse(
        token=create_access_token(user.id, user.email),
        user=UserSummary.model_validate(user),
        ai_feedback=password_strength_tips(request.password),
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    session: AsyncSession = Depends(get_session),
):
    """Exchange credentials for a bearer token."""
    user = await UserRepository(session).get_by_email(request.email)

    # Same error for unknown email and wrong password
    if user is None or not await run_in_threadpool(
        verify_password, request.password, user.password_hash
    ):
        raise InvalidCredentialsError()

    bind_principal(http_request, Principal(user_id=user.id, email=user.email))
    logger.info("User logged in", user_id=user.id)

    return LoginResponse(
        token=create_access_token(user.id, user.email),
        user=UserSummary.model_validate(user),
    )


@router.post("/password-reset", response_model=PasswordResetResponse)
async def password_reset(request: PasswordResetRequest):
    """Issue a demo one-time code. Nothing is delivered."""
    otp = 100000 + secrets.randbelow(900000)
    logger.info("Password reset requested", email=request.email)
    return PasswordResetResponse(message="OTP sent", otp=otp, ai_feedback=PASSWORD_RESET_HINT)


@router.post("/logout", response_model=MessageResponse)
async def logout(principal: Principal = Depends(get_current_principal)):
    """Tokens are stateless; the client discards its copy."""
    logger.info("User logged out", user_id=principal.user_id)
    return MessageResponse(message="Logged out")


# ========== Profile ==========
@router.get("/me", response_model=ProfileResponse)
async def get_profile(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    user = await _load_user(UserRepository(session), principal)
    return ProfileResponse.from_user(user)


@router.put("/me", response_model=ProfileResponse)
async def update_profile(
    patch: ProfilePatch,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Update the fields the client sent."""
    assignments = build_assignments(patch, PROFILE_COLUMNS)
    if not assignments:
        raise ValidationError("No valid fields to update")

    users = UserRepository(session)
    if "email" in assignments:
        owner = await users.get_by_email(assignments["email"])
        if owner is not None and owner.id != principal.user_id:
            raise EmailAlreadyRegisteredError()

    try:
        user = await users.apply_changes(principal.user_id, assignments)
    except IntegrityError:
        raise EmailAlreadyRegisteredError()
    if user is None:
        raise UserNotFoundError()

    logger.info("Profile updated", user_id=user.id, fields=list(assignments))
    return ProfileResponse.from_user(user)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    users = UserRepository(session)
    user = await _load_user(users, principal)

    if not await run_in_threadpool(verify_password, request.current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")

    new_hash = await run_in_threadpool(hash_password, request.new_password)
    await users.apply_changes(user.id, {"password_hash": new_hash})
    logger.info("Password changed", user_id=user.id)
    return MessageResponse(message="Password updated successfully")


# ========== Two-factor authentication ==========
@router.post("/2fa/setup", response_model=TwoFactorSetupResponse)
async def setup_two_factor(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Generate and store a TOTP secret. 2FA stays off until verified."""
    users = UserRepository(session)
    user = await _load_user(users, principal)

    secret = generate_secret()
    await users.apply_changes(user.id, {"two_factor_secret": secret})

    return TwoFactorSetupResponse(
        secret=secret,
        otpauth_url=provisioning_uri(secret, user.email),
        manual_entry_key=secret,
    )


async def _check_two_factor_code(
    users: UserRepository, principal: Principal, request: TwoFactorCodeRequest
) -> User:
    if not request.token:
        raise ValidationError("Token is required")

    user = await users.get_by_id(principal.user_id)
    if user is None or not user.two_factor_secret:
        raise ValidationError("2FA not setup")

    if not verify_code(user.two_factor_secret, request.token):
        raise ValidationError("Invalid token")
    return user


@router.post("/2fa/verify", response_model=MessageResponse)
async def verify_two_factor(
    request: TwoFactorCodeRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    users = UserRepository(session)
    user = await _check_two_factor_code(users, principal, request)
    await users.apply_changes(user.id, {"two_factor_enabled": True})
    logger.info("Two-factor enabled", user_id=user.id)
    return MessageResponse(message="2FA enabled successfully")


@router.post("/2fa/disable", response_model=MessageResponse)
async def disable_two_factor(
    request: TwoFactorCodeRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    users = UserRepository(session)
    user = await _check_two_factor_code(users, principal, request)
    await users.apply_changes(user.id, {"two_factor_enabled": False, "two_factor_secret": None})
    logger.info("Two-factor disabled", user_id=user.id)
    return MessageResponse(message="2FA disabled successfully")


@router.get("/2fa/status", response_model=TwoFactorStatusResponse)
async def two_factor_status(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    user = await _load_user(UserRepository(session), principal)
    return TwoFactorStatusResponse(enabled=bool(user.two_factor_enabled))


# ========== History and preferences ==========
@router.get("/login-history", response_model=LoginHistoryResponse)
async def login_history(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Recent successful logins made as this user."""
    rows = await TransactionLogRepository(session).login_history(principal.user_id)
    return LoginHistoryResponse(
        login_history=[
            LoginHistoryItem(
                id=row.id,
                endpoint=row.endpoint,
                method=row.http_method,
                status=row.status_code,
                timestamp=row.created_at,
                success=200 <= row.status_code < 300,
            )
            for row in rows
        ]
    )


@router.get("/preferences", response_model=PreferencesResponse)
async def get_preferences(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    user = await _load_user(UserRepository(session), principal)
    return PreferencesResponse(preferences=user.effective_preferences)


@router.post("/preferences", response_model=PreferencesSavedResponse)
async def save_preferences(
    request: PreferencesRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Merge the sent flags over the current preferences."""
    users = UserRepository(session)
    user = await _load_user(users, principal)

    preferences = dict(user.effective_preferences)
    preferences.update(request.model_dump(by_alias=True, exclude_none=True))
    await users.apply_changes(user.id, {"preferences": preferences})

    return PreferencesSavedResponse(message="Preferences saved successfully", preferences=preferences)
