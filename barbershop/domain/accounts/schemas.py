"""Account domain schemas - Pydantic models for validation"""

from pydantic import BaseModel, field_validator

from ...security_utils import MAX_PASSWORD_BYTES

MIN_PASSWORD_LENGTH = 6


def normalize_email(v: str) -> str:
    """Emails are matched case-insensitively: strip and lower-case before any lookup"""
    v = v.strip().lower()
    if "@" not in v:
        raise ValueError("invalid email")
    return v


def validate_password(v: str) -> str:
    if len(v) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"password must have at least {MIN_PASSWORD_LENGTH} characters")
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must have at most {MAX_PASSWORD_BYTES} bytes")
    return v


class RegisterRequest(BaseModel):
    """Schema for creating an account"""

    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password(v)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class ForgotPasswordRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class ResetPasswordRequest(BaseModel):
    token: str
    newPassword: str

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("token is required")
        return v

    @field_validator("newPassword")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return validate_password(v)


class PublicProfile(BaseModel):
    """What login returns about an account; never the hash"""

    name: str
    email: str


class LoginResponse(BaseModel):
    message: str
    user: PublicProfile


class MessageResponse(BaseModel):
    message: str
