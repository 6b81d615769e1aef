"""Request-payload Pydantic models for authentication endpoints.

Fields are plain strings on purpose: format and length rules live in the domain
value objects, so the API reports them as ``invalid_input`` with per-field
messages instead of a framework validation error.
"""

from typing import Optional

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    """Payload expected by ``POST /auth/sign-up``."""

    email: str = Field(..., examples=["jane@example.com"])
    password: str = Field(..., examples=["correct horse battery"])
    name: Optional[str] = Field(default=None, examples=["Jane"])


class SignInRequest(BaseModel):
    """Payload expected by ``POST /auth/sign-in``."""

    email: str = Field(..., examples=["jane@example.com"])
    password: str = Field(..., examples=["correct horse battery"])


class UpdatePasswordRequest(BaseModel):
    """Payload expected by ``PUT /auth/password``."""

    current_password: str = Field(..., description="Current password for verification")
    new_password: str = Field(..., description="New password, 8 to 100 characters")
    confirm_password: str = Field(..., description="Must repeat new_password exactly")


class UpdateAccountRequest(BaseModel):
    """Payload expected by ``PATCH /auth/account``."""

    name: str = Field(..., examples=["Jane Doe"])
    email: str = Field(..., examples=["jane.doe@example.com"])


class DeleteAccountRequest(BaseModel):
    """Payload expected by ``DELETE /auth/account``."""

    password: str = Field(..., description="Current password, required to confirm deletion")
