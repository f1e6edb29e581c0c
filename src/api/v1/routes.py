"""
API v1 routes.

Defines REST endpoints for the account activation API. Routes are thin:
they translate requests into registry operations and domain errors into
HTTP errors.
"""

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.adapters.smtp.console import ConsoleActivationSender
from src.api.dependencies import get_activation_sender, get_base_url, get_registry
from src.api.models import (
    ActivateRequest,
    ActivateResponse,
    AlreadyActiveResponse,
    ErrorResponse,
    IssuedResponse,
    RegisterRequest,
    StatusResponse,
)
from src.domain.activation import ActivationRegistry
from src.domain.exceptions import (
    ActivationError,
    ActivationExpired,
    ActivationNotFound,
    CodeMismatch,
    InvalidCode,
    InvalidIdentity,
)
from src.domain.ports import ActivationRecord, ActivationStatus, RedeemResult

router = APIRouter(tags=["v1"])


def _raise_http_error(exc: ActivationError, not_found: str, expired: str) -> NoReturn:
    """Translate a domain error into the matching HTTP error."""
    if isinstance(exc, InvalidIdentity):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email") from None
    if isinstance(exc, InvalidCode):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid code format"
        ) from None
    if isinstance(exc, ActivationNotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found) from None
    if isinstance(exc, ActivationExpired):
        raise HTTPException(status_code=status.HTTP_410_GONE, detail=expired) from None
    if isinstance(exc, CodeMismatch):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Code mismatch") from None
    raise exc


def _issued(
    record: ActivationRecord, base_url: str, sender: ConsoleActivationSender
) -> IssuedResponse:
    link = f"{base_url}/v1/activate?token={record.token}"
    sender.send_activation(record.identity, link, record.code)
    return IssuedResponse(
        email=record.identity,
        status=record.status,
        activation_link=link,
        code=record.code,
        expires_at=record.expires_at,
    )


def _activated(result: RedeemResult) -> ActivateResponse:
    return ActivateResponse(
        email=result.identity,
        status=result.status,
        activated_at=result.activated_at,
    )


@router.post(
    "/register",
    response_model=IssuedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Invalid email"}},
    summary="Register an email for activation",
    description="Issue an activation link and a 6-digit code for the email. "
    "Registering again always replaces the previous record with a fresh pending one.",
)
async def register(
    request_data: RegisterRequest | None = None,
    email: str | None = Query(None, description="Email (fallback when no JSON body is sent)"),
    registry: ActivationRegistry = Depends(get_registry),
    sender: ConsoleActivationSender = Depends(get_activation_sender),
    base_url: str = Depends(get_base_url),
) -> IssuedResponse:
    """
    Register an email and issue activation credentials.

    - **email**: Email address, in the JSON body or as a query parameter
    """
    identity = request_data.email if request_data and request_data.email else email
    try:
        record = registry.register(identity)
    except ActivationError as exc:
        _raise_http_error(exc, not_found="Not found", expired="Expired")
    return _issued(record, base_url, sender)


@router.get(
    "/activate",
    response_model=ActivateResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing token"},
        404: {"model": ErrorResponse, "description": "Invalid or expired token"},
        410: {"model": ErrorResponse, "description": "Token expired"},
    },
    summary="Activate by link token",
    description="Follow the activation link. Redeeming an already used link "
    "returns the current active status.",
)
async def activate_by_token(
    token: str | None = Query(None, description="Activation token from the link"),
    registry: ActivationRegistry = Depends(get_registry),
) -> ActivateResponse:
    """Activate the account owning the token."""
    if not token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing token")
    try:
        result = registry.redeem_by_token(token)
    except ActivationError as exc:
        _raise_http_error(exc, not_found="Invalid or expired token", expired="Token expired")
    return _activated(result)


@router.post(
    "/activate",
    response_model=ActivateResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid email or code format"},
        401: {"model": ErrorResponse, "description": "Code mismatch"},
        404: {"model": ErrorResponse, "description": "Not found"},
        410: {"model": ErrorResponse, "description": "Code expired"},
    },
    summary="Activate by code",
    description="Submit the email and the 6-digit code it received.",
)
async def activate_by_code(
    request_data: ActivateRequest,
    registry: ActivationRegistry = Depends(get_registry),
) -> ActivateResponse:
    """
    Activate account with its 6-digit code.

    - **email**: Registered email (case-insensitive)
    - **code**: 6-digit activation code
    """
    code = str(request_data.code) if request_data.code is not None else None
    try:
        result = registry.redeem_by_code(request_data.email, code)
    except ActivationError as exc:
        _raise_http_error(exc, not_found="Not found", expired="Code expired")
    return _activated(result)


@router.get(
    "/status",
    response_model=StatusResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid email"}},
    summary="Get activation status",
    description="Report the stored activation state of an email; "
    "unknown emails report status 'none'.",
)
async def activation_status(
    email: str | None = Query(None, description="Email to inspect"),
    registry: ActivationRegistry = Depends(get_registry),
) -> StatusResponse:
    """Return status and timestamps as currently stored."""
    try:
        report = registry.status(email)
    except ActivationError as exc:
        _raise_http_error(exc, not_found="Not found", expired="Expired")
    return StatusResponse(
        email=report.identity,
        status=report.status,
        created_at=report.created_at,
        activated_at=report.activated_at,
        expires_at=report.expires_at,
    )


@router.post(
    "/resend",
    response_model=IssuedResponse | AlreadyActiveResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid email"}},
    summary="Re-issue activation credentials",
    description="Replace the pending link and code with new ones. "
    "Active emails are left untouched.",
)
async def resend(
    request_data: RegisterRequest,
    registry: ActivationRegistry = Depends(get_registry),
    sender: ConsoleActivationSender = Depends(get_activation_sender),
    base_url: str = Depends(get_base_url),
) -> IssuedResponse | AlreadyActiveResponse:
    """
    Re-issue the activation link and code.

    - **email**: Email address to re-issue for
    """
    try:
        record = registry.resend(request_data.email)
    except ActivationError as exc:
        _raise_http_error(exc, not_found="Not found", expired="Expired")

    if record.status is ActivationStatus.ACTIVE:
        return AlreadyActiveResponse(
            email=record.identity,
            status=record.status,
            message="Already active",
        )
    return _issued(record, base_url, sender)
