"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Email and code fields are accepted loosely here; their shape is checked by
the domain so that malformed input maps to 400 rather than 422.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.domain.ports import ActivationStatus


class RegisterRequest(BaseModel):
    """Request model for registration and resend."""

    email: str | None = Field(None, description="Email address to activate")


class ActivateRequest(BaseModel):
    """Request model for activation by code."""

    email: str | None = Field(None, description="Registered email address")
    code: str | int | None = Field(None, description="6-digit activation code")


class IssuedResponse(BaseModel):
    """Response model for a newly issued token/code pair."""

    email: str
    status: ActivationStatus
    activation_link: str
    code: str
    expires_at: datetime


class AlreadyActiveResponse(BaseModel):
    """Response model for a resend on an already active identity."""

    email: str
    status: ActivationStatus
    message: str


class ActivateResponse(BaseModel):
    """Response model for successful (or repeated) activation."""

    email: str
    status: ActivationStatus
    activated_at: datetime | None = None


class StatusResponse(BaseModel):
    """Response model for activation status."""

    email: str
    status: ActivationStatus
    created_at: datetime | None = None
    activated_at: datetime | None = None
    expires_at: datetime | None = None


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
