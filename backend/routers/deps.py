"""Shared route dependencies"""

from __future__ import annotations

from fastapi import Request

from services.container import ServiceContainer


def get_services(request: Request) -> ServiceContainer:
    """Service container built by the application lifespan"""
    return request.app.state.services
