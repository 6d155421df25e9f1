from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, model_validator


class SignInRequest(BaseModel):
    """Request to sign in with email and password."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class SignUpRequest(BaseModel):
    """Request to register with email and password."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=6, description="User's password")
    confirm_password: str = Field(..., min_length=1, description="Password confirmation")

    @model_validator(mode="after")
    def passwords_match(self) -> SignUpRequest:
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class RefreshRequest(BaseModel):
    refresh_token: str | None = None


class AuthResponse(BaseModel):
    """Response containing user session and access token."""

    access_token: str = Field(..., description="JWT access token for API calls")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    refresh_token: str | None = Field(default=None, description="Refresh token for token renewal")
    user: dict = Field(..., description="User information (id, email)")
