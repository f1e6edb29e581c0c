"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting the activation
registry and infrastructure adapters into routes.
"""

from datetime import timedelta

from fastapi import Depends, Request

from src.adapters.clock import SystemClock
from src.adapters.random_source import SecretsRandomSource
from src.adapters.repository.memory import InMemoryActivationRepository
from src.adapters.smtp.console import ConsoleActivationSender
from src.config.settings import Settings, get_settings
from src.domain.activation import ActivationRegistry

# Module-level singleton - ConsoleActivationSender is stateless
_activation_sender = ConsoleActivationSender()


def build_registry(settings: Settings) -> ActivationRegistry:
    """
    Create the activation registry with its default adapters.

    Called once during app lifespan startup; the registry owns all
    records for the lifetime of the process.
    """
    return ActivationRegistry(
        repository=InMemoryActivationRepository(),
        clock=SystemClock(),
        random_source=SecretsRandomSource(token_bytes=settings.token_bytes),
        ttl=timedelta(seconds=settings.activation_ttl_seconds),
        sweep_grace=timedelta(seconds=settings.sweep_grace_seconds),
    )


def get_registry(request: Request) -> ActivationRegistry:
    """
    Get activation registry from app state.

    The registry is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.registry


def get_activation_sender() -> ConsoleActivationSender:
    """Get console activation sender (singleton)."""
    return _activation_sender


def get_base_url(request: Request, settings: Settings = Depends(get_settings)) -> str:
    """
    Resolve the public base address used in activation links.

    Uses PUBLIC_BASE_URL when configured, otherwise the forwarded
    protocol and Host header of the incoming request.
    """
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")

    proto = request.headers.get("x-forwarded-proto", "http")
    host = request.headers.get("host") or request.url.netloc
    return f"{proto}://{host}"
