"""Account-related Pydantic schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    """Fields required to open an account."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1, description="Plain-text password, hashed on receipt")
    gender: str = Field(..., min_length=1, max_length=32)
    birthday: str = Field(..., min_length=1, description="ISO-8601 date of birth")

    @field_validator("name", "gender")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class LoginRequest(BaseModel):
    """Email and password credentials."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class AccountResponse(BaseModel):
    """An account as shown to its owner."""

    id: str
    name: str
    email: str
    gender: str
    birthday: date
    age: int
    bio: str | None = None
    photo_url: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Returned after registration or login."""

    message: str
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type (always 'bearer')")
    user: AccountResponse


class AccountUpdateRequest(BaseModel):
    """Partial account update; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    bio: str | None = Field(None, max_length=500)
    photo_url: str | None = None
    gender: str | None = Field(None, min_length=1, max_length=32)
    birthday: str | None = Field(None, description="ISO-8601 date of birth")


class AccountUpdateResponse(BaseModel):
    message: str
    user: AccountResponse
