"""User and authentication schemas."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from core.schemas import CamelModel
from domain.product.models import RiskLevel

# Field -> column mapping for profile patches, in UPDATE order
PROFILE_COLUMNS = {
    "first_name": "first_name",
    "last_name": "last_name",
    "email": "email",
    "phone": "phone",
    "risk_appetite": "risk_appetite",
    "investment_goal": "investment_goal",
    "monthly_investment": "monthly_investment",
}


# ========== Requests ==========
class SignupRequest(CamelModel):
    """Registration request."""

    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1)
    last_name: Optional[str] = None
    risk_appetite: Optional[RiskLevel] = None


class LoginRequest(CamelModel):
    """Login request."""

    email: EmailStr
    password: str = Field(min_length=1)


class PasswordResetRequest(CamelModel):
    email: EmailStr


class ProfilePatch(CamelModel):
    """Partial profile update; only keys the client sends are applied."""

    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    risk_appetite: Optional[RiskLevel] = None
    investment_goal: Optional[str] = None
    monthly_investment: Optional[float] = Field(None, gt=0)

    @field_validator("first_name", "email", "risk_appetite")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8)
    confirm_password: str = Field(min_length=8)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        """Confirmation must repeat the new password."""
        if "new_password" in info.data and v != info.data["new_password"]:
            raise ValueError("Passwords don't match")
        return v


class TwoFactorCodeRequest(CamelModel):
    # Checked in the handler so a missing code gets a plain message
    token: Optional[str] = None


class PreferencesRequest(CamelModel):
    email_notifications: Optional[bool] = None
    sms_notifications: Optional[bool] = None
    market_updates: Optional[bool] = None
    portfolio_alerts: Optional[bool] = None


def _format_amount(value: Optional[float]) -> str:
    if not value:
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)


# ========== Responses ==========
class UserSummary(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: Optional[str] = None
    risk_appetite: RiskLevel


class LoginResponse(BaseModel):
    token: str
    user: UserSummary


class SignupResponse(LoginResponse):
    ai_feedback: list[str]


class PasswordResetResponse(BaseModel):
    message: str
    otp: int
    ai_feedback: str


class ProfileResponse(CamelModel):
    """Profile view; absent optional values are rendered as empty strings."""

    id: str
    email: str
    first_name: str
    last_name: str = ""
    phone: str = ""
    risk_appetite: RiskLevel
    investment_goal: str = ""
    monthly_investment: str = ""

    @classmethod
    def from_user(cls, user) -> "ProfileResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name or "",
            phone=user.phone or "",
            risk_appetite=user.risk_appetite,
            investment_goal=user.investment_goal or "",
            monthly_investment=_format_amount(user.monthly_investment),
        )


class TwoFactorSetupResponse(CamelModel):
    secret: str
    otpauth_url: str
    manual_entry_key: str


class TwoFactorStatusResponse(BaseModel):
    enabled: bool


class PreferencesResponse(BaseModel):
    preferences: dict[str, bool]


class PreferencesSavedResponse(PreferencesResponse):
    message: str
