"""
auth/schemas.py

Pydantic models for authentication flows:
- Login (with company code for security officers) and company signup payloads
- JWT token payload
- Authenticated profile response
- Profile settings and password change payloads
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, model_validator

from guardhub.core.validators import company_code_validator, password_validator
from guardhub.database.enums import EmploymentStatus, UserRole

# --------------------------------------------------
# Custom Types
# --------------------------------------------------
PasswordStr = Annotated[str, AfterValidator(password_validator)]
CompanyCodeStr = Annotated[str, AfterValidator(company_code_validator)]


# --------------------------------------------------
# AUTH REQUEST SCHEMAS
# --------------------------------------------------
class LoginRequest(BaseModel):
    """
    Login payload. `company_code` is mandatory for security officers only.
    """

    email: EmailStr = Field(..., description="Profile email address")
    password: str = Field(..., min_length=1, max_length=128, description="Account password")
    company_code: CompanyCodeStr | None = Field(
        None, description="Company code (required for security officers)"
    )


class CompanySignupRequest(BaseModel):
    """
    Public registration of a new security company and its first admin.
    """

    company_name: str = Field(..., min_length=1, max_length=200, description="Company name")
    company_email: EmailStr | None = Field(None, description="Company contact email")
    company_phone: str | None = Field(None, max_length=30, description="Company phone")
    company_address: str | None = Field(None, description="Company address")
    full_name: str = Field(..., min_length=1, max_length=150, description="Admin full name")
    email: EmailStr = Field(..., description="Admin login email")
    password: PasswordStr = Field(..., description="Admin password (min 6 characters)")
    confirm_password: str = Field(..., description="Must match password")

    @model_validator(mode="after")
    def passwords_match(self) -> "CompanySignupRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class ProfileUpdateRequest(BaseModel):
    """Editable fields of the caller's own profile."""

    full_name: str = Field(..., min_length=1, max_length=150, description="Display name")
    phone: str | None = Field(None, max_length=30, description="Contact phone")


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: PasswordStr = Field(..., description="New password (min 6 characters)")
    confirm_password: str = Field(..., description="Must match new_password")

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordChangeRequest":
        if self.new_password != self.confirm_password:
            raise ValueError("New passwords do not match")
        return self


# --------------------------------------------------
# AUTH TOKEN SCHEMAS
# --------------------------------------------------
class TokenPayload(BaseModel):
    """
    Decoded JWT access token claims.
    """

    sub: UUID = Field(..., description="Profile ID")
    role: UserRole = Field(..., description="Role at issue time")
    exp: int = Field(..., description="Expiry (epoch seconds)")
    jti: str = Field(..., description="Unique token ID used for blacklisting")


# --------------------------------------------------
# AUTH RESPONSE SCHEMAS
# --------------------------------------------------
class AuthUserResponse(BaseModel):
    """
    The authenticated profile together with its company branding.
    """

    id: UUID
    email: EmailStr
    full_name: str
    phone: str | None = None
    role: UserRole
    company_id: UUID | None = None
    company_name: str | None = None
    company_code: str | None = None
    company_logo_url: str | None = None
    staff_code: str | None = None
    avatar_url: str | None = None
    employment_status: EmploymentStatus = EmploymentStatus.ACTIVE
    is_active: bool = True
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    access_token: str = Field(..., description="JWT access token (also set as HttpOnly cookie)")
    token_type: str = Field(default="bearer")
    user: AuthUserResponse


class CompanySignupResponse(BaseModel):
    company_id: UUID = Field(..., description="New company ID")
    company_code: str = Field(..., description="Code officers use to sign in")
    user: AuthUserResponse
