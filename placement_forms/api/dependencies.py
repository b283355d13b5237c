"""
Shared route dependencies.
"""

from fastapi import Request

from placement_forms.services.container import ServiceContainer


def get_services(request: Request) -> ServiceContainer:
    """The container built at startup (see main.startup_event)."""
    return request.app.state.services
